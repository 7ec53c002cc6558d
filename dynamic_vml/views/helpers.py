"""
Dynamic List Template Helper

Every template gets a DynamicListHelper bound to its own scope as ``dvml``.
A page template starts the rendering of a list with:

    {{ dvml.list_editor_for('books') }}
    {{ dvml.display_list_for('books', item_template='BookSummary') }}

and the default templates call the remaining helpers to walk down the tree:

    DynamicListContainer  -> render_list_editor / render_list_display
    DynamicList           -> render_item_container_editor / _display (per key)
    DynamicItemContainer  -> render_item_editor / render_item_display

Why A Helper Object Per Scope?
Nested lists are rendered by templates calling helpers that render other
templates. Binding the helper to the scope of the template that calls it
means every call knows its model and field prefix without any global
"current list" state; the shared state (resolved parameters) lives in the
RenderContext, keyed by container id (and item id for items).

Helpers return markupsafe.Markup so the HTML they produce is not escaped a
second time by the calling template.
"""

import dataclasses
import logging
from typing import TYPE_CHECKING, Any, Optional

from markupsafe import Markup
from pydantic import BaseModel

from dynamic_vml.config import Settings
from dynamic_vml.exceptions import (
    AmbiguousRenderModeError,
    DynamicListError,
    MissingConfigurationError,
    NotADynamicListError,
    TemplateRenderError,
)
from dynamic_vml.models.entities import DynamicList, DynamicListItem
from dynamic_vml.models.enums import ListRenderMode, NewItemMethod, RenderKind
from dynamic_vml.models.schemas import DynamicListDisplayOptions, DynamicListEditorOptions
from dynamic_vml.services.resolution import ParameterResolver, coerce_render_mode
from dynamic_vml.views.context import ADDITIONAL_VIEW_DATA, ContainerSlot, ViewScope, html_field_name

if TYPE_CHECKING:
    from dynamic_vml.views.templates import TemplateRenderer

logger = logging.getLogger(__name__)


def view_data_dict(data: Any) -> Optional[dict[str, Any]]:
    """Turn additional view data (dict, pydantic model, dataclass or object) into a dict."""
    if data is None:
        return None
    if isinstance(data, dict):
        return dict(data)
    if isinstance(data, BaseModel):
        return data.model_dump()
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return dataclasses.asdict(data)
    return dict(vars(data))


def item_templates_folder(parameters: Any, kind: RenderKind, settings: Settings) -> str:
    """Folder of the item and item container templates: the one of the list template."""
    list_template = parameters.list.list_template
    new_item = getattr(parameters, "new_item", None)
    if not list_template and new_item is not None:
        list_template = new_item.list_template or ""
    if "/" in list_template:
        return list_template.rsplit("/", 1)[0]
    return settings.templates_folder(kind == RenderKind.EDITOR)


class DynamicListHelper:
    """Template helper bound to one ViewScope."""

    def __init__(self, scope: ViewScope, renderer: "TemplateRenderer"):
        self.scope = scope
        self.renderer = renderer
        self.context = scope.context
        self.settings = scope.context.settings
        self.resolver = ParameterResolver(scope.context)

    # ============================================
    # Entry points used by page templates
    # ============================================

    def list_editor_for(
        self,
        property: str,
        action_url: Optional[str] = None,
        add_new_item_text: Optional[str] = None,
        item_template: Optional[str] = None,
        item_container_template: Optional[str] = None,
        list_template: Optional[str] = None,
        list_container_template: Optional[str] = None,
        additional_view_data: Any = None,
        mode: Optional[ListRenderMode] = None,
        method: Optional[NewItemMethod] = None,
    ) -> Markup:
        """
        Render the editor of the DynamicList held by ``property`` of the model.

        Every argument left as None falls through to the registered
        @dynamic_list configuration, then to inference and defaults. Fields
        set on the registered configuration win over these arguments.

        Args:
            property: Name of the model attribute holding the DynamicList
            action_url: URL of the server action returning a new item
            add_new_item_text: Text of the "add" link
            additional_view_data: Values made available to the list, item
                container and item templates as ``view_data``
            method: NewItemMethod.POST is required to send additional view
                data back to the server with new items

        Raises:
            ValueError: the property holds None
            NotADynamicListError: the property holds something else than a DynamicList
            AmbiguousRenderModeError: mode is not a ListRenderMode value
        """
        options = DynamicListEditorOptions(
            item_template=item_template,
            item_container_template=item_container_template,
            list_template=list_template,
            mode=self._mode(property, mode),
            action_url=action_url,
            add_new_item_text=add_new_item_text,
            method=method,
        )
        return self._list_for(property, RenderKind.EDITOR, options, list_container_template, additional_view_data)

    def display_list_for(
        self,
        property: str,
        item_template: Optional[str] = None,
        item_container_template: Optional[str] = None,
        list_template: Optional[str] = None,
        list_container_template: Optional[str] = None,
        additional_view_data: Any = None,
        mode: Optional[ListRenderMode] = None,
    ) -> Markup:
        """Render the read-only display of a DynamicList (see list_editor_for)."""
        options = DynamicListDisplayOptions(
            item_template=item_template,
            item_container_template=item_container_template,
            list_template=list_template,
            mode=self._mode(property, mode),
        )
        return self._list_for(property, RenderKind.DISPLAY, options, list_container_template, additional_view_data)

    def _mode(self, property: str, mode: Any) -> Optional[ListRenderMode]:
        if mode is None:
            return None
        value = getattr(self.scope.model, property, None)
        return coerce_render_mode(mode, getattr(value, "container_id", None))

    def _list_for(
        self,
        property: str,
        kind: RenderKind,
        options,
        list_container_template: Optional[str],
        additional_view_data: Any,
    ) -> Markup:
        value = getattr(self.scope.model, property, None)
        if value is None:
            raise ValueError(f"The dynamic list property '{property}' of {type(self.scope.model).__name__} is None")
        if not isinstance(value, DynamicList):
            raise NotADynamicListError(
                f"The property '{property}' holds a {type(value).__name__}, not a DynamicList.",
                options=options,
            )

        owner = type(self.scope.model)
        slot = ContainerSlot(owner=owner, property_name=property)
        if kind == RenderKind.EDITOR:
            slot.editor_options = options
        else:
            slot.display_options = options
        self.context.stage(value.container_id, slot)

        attribute = self.context.registry.attribute_for(owner, property)
        folder_field = "editor_templates" if kind == RenderKind.EDITOR else "display_templates"
        folder = (attribute and getattr(attribute, folder_field)) or self.settings.templates_folder(
            kind == RenderKind.EDITOR
        )
        container_template = (
            (attribute and attribute.list_container_template)
            or list_container_template
            or self.settings.list_container_template
        )

        self.context.put_once(ADDITIONAL_VIEW_DATA, view_data_dict(additional_view_data))
        try:
            return self._render(f"{folder}/{container_template}", self.scope.child(value, property), value.container_id)
        finally:
            # Never let undrained view data reach the next list
            self.context.take_once(ADDITIONAL_VIEW_DATA)

    # ============================================
    # List container level
    # ============================================

    def render_list_editor(self) -> Markup:
        return self._render_list(RenderKind.EDITOR)

    def render_list_display(self) -> Markup:
        return self._render_list(RenderKind.DISPLAY)

    def _render_list(self, kind: RenderKind) -> Markup:
        container_id = self._current_list().container_id
        parameters = self.resolver.resolve_list_parameters(container_id, kind, self.scope)
        view_data = {**self.scope.view_data, **(parameters.additional_view_data or {})}
        scope = ViewScope(self.context, self.scope.model, self.scope.prefix, view_data)
        return self._render(parameters.list.list_template, scope, container_id, parameters)

    # ============================================
    # List level
    # ============================================

    def render_item_container_editor(self, item_id: str) -> Markup:
        return self._render_item_container(item_id, RenderKind.EDITOR)

    def render_item_container_display(self, item_id: str) -> Markup:
        return self._render_item_container(item_id, RenderKind.DISPLAY)

    def _render_item_container(self, item_id: str, kind: RenderKind) -> Markup:
        if item_id is None:
            raise ValueError("item_id cannot be None")
        current = self._current_list()
        parameters = self.resolver.resolve_item_parameters(current.container_id, item_id, kind, self.scope)
        entry = current.get(item_id)
        name = f"{item_templates_folder(parameters, kind, self.settings)}/{parameters.list.item_container_template}"
        scope = self.scope.child(entry, f"[{item_id}]", container_id=current.container_id)
        return self._render(name, scope, current.container_id, parameters)

    def add_new_item_text(self) -> str:
        return self._editor_parameters().add_new_item_text

    def action_url(self) -> str:
        """The instruction given to ``dvml.add`` by the "add" link of the current list."""
        return self._editor_parameters().action_info(self.settings.get_additional_view_data)

    # ============================================
    # Item container level
    # ============================================

    def render_item_editor(self) -> Markup:
        return self._render_item(RenderKind.EDITOR)

    def render_item_display(self) -> Markup:
        return self._render_item(RenderKind.DISPLAY)

    def _render_item(self, kind: RenderKind) -> Markup:
        entry = self._current_entry()
        parameters = self.resolver.resolve_item_parameters(self.scope.container_id, entry.index, kind)

        if parameters.list.mode == ListRenderMode.VIEW_MODEL_ONLY:
            scope = self.scope.child(entry.view_model, "ViewModel")
        elif parameters.list.mode == ListRenderMode.VIEW_MODEL_WITH_OPTIONS:
            scope = self.scope
        else:
            raise AmbiguousRenderModeError(
                f"Invalid dynamic list render mode {parameters.list.mode!r}.",
                container_id=parameters.container_id,
                parameters=parameters,
            )

        name = f"{item_templates_folder(parameters, kind, self.settings)}/{parameters.list.item_template}"
        return self._render(name, scope, parameters.container_id, parameters)

    def index_field_name(self) -> str:
        """Name of the hidden field posting the item's key, e.g. "Books.Index"."""
        parameters = self.item_parameters()
        if parameters is None:
            raise MissingConfigurationError(
                "index_field_name() can only be used inside an item container template."
            )
        return html_field_name(parameters.list.prefix, "Index")

    # ============================================
    # Accessors
    # ============================================

    def field_name(self, name: str) -> str:
        return self.scope.field_name(name)

    def list_parameters(self, kind: RenderKind = RenderKind.EDITOR):
        """Resolved parameters of the current list, or None before resolution."""
        slot = self.context.find(self._current_list().container_id)
        return slot.parameters_for(kind) if slot else None

    def item_parameters(self):
        """Parameters of the current item, or None outside an item container."""
        model = self.scope.model
        if not isinstance(model, DynamicListItem) or model.index is None or self.scope.container_id is None:
            return None
        return self.context.lookup_item(self.scope.container_id, model.index)

    # ============================================
    # Internals
    # ============================================

    def _current_list(self) -> DynamicList:
        if not isinstance(self.scope.model, DynamicList):
            raise NotADynamicListError(
                f"This helper must be called from a list template; the current model is a "
                f"{type(self.scope.model).__name__}."
            )
        return self.scope.model

    def _current_entry(self) -> DynamicListItem:
        if not isinstance(self.scope.model, DynamicListItem):
            raise MissingConfigurationError(
                f"This helper must be called from an item container template; the current model is a "
                f"{type(self.scope.model).__name__}."
            )
        return self.scope.model

    def _editor_parameters(self):
        parameters = self.list_parameters(RenderKind.EDITOR)
        if parameters is None:
            raise MissingConfigurationError(
                "The editor parameters of the current list were not resolved. Render the list "
                "through list_editor_for().",
                container_id=self._current_list().container_id,
            )
        return parameters

    def _render(self, name: str, scope: ViewScope, container_id: Optional[str], parameters: Any = None) -> Markup:
        try:
            return Markup(self.renderer.render(name, scope.model, scope))
        except DynamicListError:
            raise
        except Exception as e:
            logger.error(f"Failed to render dynamic list template '{name}' ({scope.prefix or 'root'}): {e}")
            raise TemplateRenderError(
                f"An error occurred while rendering the template '{name}' of the dynamic list "
                f"'{container_id}': {e}",
                container_id=container_id,
                parameters=parameters,
            ) from e
