"""
Parameter Resolution Engine

Decides, for every list and item being rendered, which templates, field
prefix and render mode apply. Configuration is merged field by field:

1. Fields set explicitly on the registered DynamicListAttribute
2. Fields set on the per-call options (list_editor_for / display_list_for)
3. Inference from the list's item view model type (see ListRegistry)
4. Defaults from Settings

Inferred and default values:
- item_template           <- name of the item view model type (e.g. "BookViewModel")
- item_container_template <- Settings.item_container_template
- list_template           <- Settings.list_template, always placed under the
                             editor or display templates folder
- action_url (editor)     <- "Add" + view model type name
- add_new_item_text       <- "Add new " + view model type name
- method (editor)         <- GET
- mode                    <- VIEW_MODEL_ONLY

Resolution happens once per container per render: the result is cached in
the container's slot in the RenderContext and returned as-is afterwards.
Items never perform their own lookup; their parameters are derived from the
already resolved list parameters.
"""

import logging
from typing import Any, Optional

from dynamic_vml.exceptions import AmbiguousRenderModeError, MalformedNewItemRequestError, MissingConfigurationError
from dynamic_vml.models.enums import ListRenderMode, NewItemMethod, RenderKind
from dynamic_vml.models.parameters import (
    ItemDisplayParameters,
    ItemEditorParameters,
    ListDisplayParameters,
    ListEditorParameters,
    ListParameters,
)
from dynamic_vml.models.schemas import AddNewDynamicItem
from dynamic_vml.views.context import ADDITIONAL_VIEW_DATA, ContainerSlot, RenderContext, ViewScope

logger = logging.getLogger(__name__)


def coerce_render_mode(mode: Any, container_id: Optional[str] = None) -> ListRenderMode:
    """Return ``mode`` as a ListRenderMode, failing for unknown values."""
    try:
        return ListRenderMode(mode)
    except ValueError as e:
        raise AmbiguousRenderModeError(
            f"Invalid dynamic list render mode {mode!r}. Expected one of "
            f"{', '.join(m.name for m in ListRenderMode)}.",
            container_id=container_id,
        ) from e


class ParameterResolver:
    """Resolves list and item parameters against one RenderContext."""

    def __init__(self, context: RenderContext):
        self.context = context
        self.settings = context.settings
        self.registry = context.registry

    # ============================================
    # List level
    # ============================================

    def resolve_list_parameters(self, container_id: str, kind: RenderKind, scope: ViewScope):
        """
        Resolve (or return the cached) parameters of a list container.

        Args:
            container_id: Id of the list being rendered
            kind: RenderKind.EDITOR or RenderKind.DISPLAY
            scope: Scope of the list container template; provides the list
                itself and the current HTML field prefix

        Returns:
            ListEditorParameters or ListDisplayParameters, depending on kind
        """
        slot = self.context.lookup(container_id)
        cached = slot.parameters_for(kind)
        if cached is not None:
            return cached

        editor = kind == RenderKind.EDITOR
        attribute = self.registry.attribute_for(slot.owner, slot.property_name)
        options = slot.options_for(kind)
        if attribute is None and options is None:
            call = "list_editor_for()" if editor else "display_list_for()"
            raise MissingConfigurationError(
                f"The dynamic list '{container_id}' has no {kind.value} configuration. Neither a "
                f"@dynamic_list registration nor per-call options were found; use {call} to render it.",
                container_id=container_id,
            )

        sources = [source for source in (attribute, options) if source is not None]

        def pick(field: str) -> Any:
            for source in sources:
                value = getattr(source, field, None)
                if value is not None:
                    return value
            return None

        type_name: Optional[str] = None

        def view_model_type_name() -> str:
            nonlocal type_name
            if type_name is None:
                type_name = self.registry.item_type_name(slot.owner, slot.property_name, scope.model)
            return type_name

        mode = pick("mode")
        mode = ListRenderMode.VIEW_MODEL_ONLY if mode is None else coerce_render_mode(mode, container_id)

        item_template = pick("item_template") or view_model_type_name()
        item_container_template = pick("item_container_template") or self.settings.item_container_template
        folder = pick("editor_templates" if editor else "display_templates") or self.settings.templates_folder(editor)
        list_template = f"{folder}/{pick('list_template') or self.settings.list_template}"

        parameters = ListParameters(
            container_id=container_id,
            item_template=item_template,
            item_container_template=item_container_template,
            list_template=list_template,
            prefix=scope.prefix,
            mode=mode,
        )
        additional_view_data = self.context.take_once(ADDITIONAL_VIEW_DATA)

        if editor:
            method = pick("method")
            resolved = ListEditorParameters(
                list=parameters,
                additional_view_data=additional_view_data,
                action_url=pick("action_url") or f"Add{view_model_type_name()}",
                add_new_item_text=pick("add_new_item_text") or f"Add new {view_model_type_name()}",
                method=NewItemMethod.GET if method is None else NewItemMethod(method),
            )
        else:
            resolved = ListDisplayParameters(list=parameters, additional_view_data=additional_view_data)

        logger.debug(
            f"Resolved {kind.value} parameters of '{container_id}': {item_template} in "
            f"{list_template} at prefix '{scope.prefix}'"
        )
        slot.store(kind, resolved)
        return resolved

    # ============================================
    # Item level
    # ============================================

    def resolve_item_parameters(
        self,
        container_id: Optional[str],
        item_id: Optional[str],
        kind: RenderKind,
        scope: Optional[ViewScope] = None,
    ):
        """
        Return the parameters of one item, deriving them from its list.

        The list must have been resolved already, unless ``scope`` (the list
        template scope) is given so the list can be resolved on demand.
        """
        if item_id is None:
            raise ValueError("item_id cannot be None")

        if container_id is None:
            raise MissingConfigurationError(
                f"No list owns the dynamic list item '{item_id}'. Item templates must be "
                "rendered through render_item_container_editor() or render_item_container_display().",
            )

        editor = kind == RenderKind.EDITOR
        cached = self.context.lookup_item(container_id, item_id)
        if not isinstance(cached, ItemEditorParameters if editor else ItemDisplayParameters):
            cached = None

        slot = self.context.lookup(container_id)
        list_parameters = slot.parameters_for(kind)
        if list_parameters is None:
            if scope is None:
                raise MissingConfigurationError(
                    f"The dynamic list '{container_id}' has not been resolved before its item '{item_id}'.",
                    container_id=container_id,
                )
            list_parameters = self.resolve_list_parameters(container_id, kind, scope)

        if cached is not None and (cached.editor if editor else cached.display) is list_parameters:
            return cached

        if editor:
            item = ItemEditorParameters(
                container_id=container_id,
                index=item_id,
                additional_view_data=list_parameters.additional_view_data,
                editor=list_parameters,
            )
        else:
            item = ItemDisplayParameters(
                container_id=container_id,
                index=item_id,
                additional_view_data=list_parameters.additional_view_data,
                display=list_parameters,
            )
        return self.context.stage_item(container_id, item_id, item)

    # ============================================
    # New item reconstruction
    # ============================================

    def resolve_new_item_parameters(
        self,
        item_id: str,
        new_item: AddNewDynamicItem,
        method: NewItemMethod,
    ) -> ItemEditorParameters:
        """
        Rebuild editor parameters from a new-item payload and stage them.

        The reconstruction is partial: list_template, action_url and
        add_new_item_text are left empty since rendering a single item
        container does not need them.

        Raises:
            MalformedNewItemRequestError: a required payload field is missing
        """
        if item_id is None:
            raise ValueError("item_id cannot be None")

        missing = new_item.missing_fields()
        if missing:
            raise MalformedNewItemRequestError(
                f"The AddNewDynamicItem payload received by the server does not contain a valid "
                f"{', '.join(missing)}. Make sure the add-item request was produced by the dynamic "
                "list client script and that POST actions read it from the JSON body.",
                container_id=new_item.container_id,
                new_item=new_item,
            )

        additional_view_data = new_item.get_additional_view_data()
        container_id = new_item.container_id
        editor = ListEditorParameters(
            list=ListParameters(
                container_id=container_id,
                item_template=new_item.item_template,
                item_container_template=new_item.item_container_template,
                list_template="",
                prefix=new_item.prefix,
                mode=coerce_render_mode(new_item.mode, container_id),
            ),
            additional_view_data=additional_view_data,
            action_url="",
            add_new_item_text="",
            method=method,
        )
        self.context.stage(container_id, ContainerSlot(editor_parameters=editor))

        item = ItemEditorParameters(
            container_id=container_id,
            index=item_id,
            additional_view_data=additional_view_data,
            editor=editor,
            new_item=new_item,
        )
        return self.context.stage_item(container_id, item_id, item)
