"""
Render Context - View-Context Propagation Layer

One RenderContext is created per request (per page render or per new-item
render) and passed down through every template invocation of that render.
It stores the resolved parameters so nested templates can recover them
without resolving again.

Why Keyed Slots?
Lists of different item types can be nested inside each other. If the
resolved parameters lived in a single "current list" slot, rendering a
child list would overwrite the parameters of its parent while the parent
is still being rendered. Every slot is therefore keyed by the container id
(for lists) or by the container id and item id (for items). Item ids are
only unique within their list, so a nested list may reuse its parent's keys.

The Ambient Slot:
Additional view data given to ``list_editor_for`` / ``display_list_for``
has to reach exactly one list: the one being rendered next. It is placed
in a single ambient slot with ``put_once`` and moved out with
``take_once``; a second read observes nothing, so the data can never leak
into a sibling list.

ViewScope is what one template invocation sees: its model, its HTML field
prefix and its view data (copied from the parent scope, never shared back).
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from dynamic_vml.config import Settings, get_settings
from dynamic_vml.exceptions import MissingConfigurationError
from dynamic_vml.models.enums import RenderKind
from dynamic_vml.models.parameters import (
    ItemDisplayParameters,
    ItemEditorParameters,
    ListDisplayParameters,
    ListEditorParameters,
)
from dynamic_vml.models.schemas import DynamicListDisplayOptions, DynamicListEditorOptions
from dynamic_vml.services.registry import ListRegistry, default_registry

ADDITIONAL_VIEW_DATA = "additional_view_data"

ItemParams = Union[ItemDisplayParameters, ItemEditorParameters]


def html_field_name(prefix: str, name: str) -> str:
    """Combine a field prefix and a field name the way form fields are named."""
    if not prefix:
        return name
    if not name:
        return prefix
    if name.startswith("["):
        return prefix + name
    return f"{prefix}.{name}"


@dataclass
class ContainerSlot:
    """
    Everything staged for one list container.

    The options and the owning property are staged by ``list_editor_for`` /
    ``display_list_for``; the parameters are filled in by the resolver the
    first time the list is resolved for each render kind.
    """
    owner: Optional[type] = None
    property_name: Optional[str] = None
    editor_options: Optional[DynamicListEditorOptions] = None
    display_options: Optional[DynamicListDisplayOptions] = None
    editor_parameters: Optional[ListEditorParameters] = None
    display_parameters: Optional[ListDisplayParameters] = None

    def options_for(self, kind: RenderKind):
        return self.editor_options if kind == RenderKind.EDITOR else self.display_options

    def parameters_for(self, kind: RenderKind):
        return self.editor_parameters if kind == RenderKind.EDITOR else self.display_parameters

    def store(self, kind: RenderKind, parameters) -> None:
        if kind == RenderKind.EDITOR:
            self.editor_parameters = parameters
        else:
            self.display_parameters = parameters


class RenderContext:
    """Per-request store of staged options and resolved parameters."""

    def __init__(self, settings: Optional[Settings] = None, registry: Optional[ListRegistry] = None):
        self.settings = settings or get_settings()
        self.registry = registry or default_registry
        self._containers: dict[str, ContainerSlot] = {}
        self._items: dict[tuple[str, str], ItemParams] = {}
        self._ambient: dict[str, Any] = {}

    # ============================================
    # Container slots
    # ============================================

    def stage(self, container_id: str, slot: ContainerSlot) -> ContainerSlot:
        """Register the slot of a list container, replacing any previous one."""
        self._containers[container_id] = slot
        return slot

    def find(self, container_id: str) -> Optional[ContainerSlot]:
        return self._containers.get(container_id)

    def lookup(self, container_id: str) -> ContainerSlot:
        """
        Return the slot of a list container.

        Raises:
            MissingConfigurationError: nothing was staged for the container
        """
        slot = self._containers.get(container_id)
        if slot is None:
            raise MissingConfigurationError(
                f"Could not find the dynamic list configuration for the container '{container_id}'. "
                "Make sure to render the list through list_editor_for() (for editing) or "
                "display_list_for() (for display) instead of rendering its templates directly.",
                container_id=container_id,
            )
        return slot

    # ============================================
    # Item slots
    # ============================================

    def stage_item(self, container_id: str, item_id: str, parameters: ItemParams) -> ItemParams:
        self._items[(container_id, item_id)] = parameters
        return parameters

    def lookup_item(self, container_id: str, item_id: str) -> Optional[ItemParams]:
        """Return the cached parameters of an item, or None (resolve through its list)."""
        return self._items.get((container_id, item_id))

    # ============================================
    # Ambient single-use slot
    # ============================================

    def put_once(self, key: str, value: Any) -> None:
        self._ambient[key] = value

    def take_once(self, key: str, default: Any = None) -> Any:
        """Move a value out of the ambient slot; later reads get ``default``."""
        return self._ambient.pop(key, default)


class ViewScope:
    """
    The model, field prefix and view data of one template invocation.

    Attributes:
        context: The RenderContext of the whole render
        model: The model of the template
        prefix: HTML field prefix of the model (e.g. "books[Xy3].ViewModel")
        view_data: Loose values visible to this template and its children
        container_id: Id of the list owning the item, set on item container scopes
    """

    def __init__(
        self,
        context: RenderContext,
        model: Any,
        prefix: str = "",
        view_data: Optional[dict[str, Any]] = None,
        container_id: Optional[str] = None,
    ):
        self.context = context
        self.model = model
        self.prefix = prefix
        self.view_data = dict(view_data or {})
        self.container_id = container_id

    def field_name(self, name: str) -> str:
        return html_field_name(self.prefix, name)

    def field_id(self, name: str) -> str:
        """Element id for a field, with separators replaced by underscores."""
        full = self.field_name(name)
        return "".join(c if c.isalnum() or c in "-_" else "_" for c in full)

    def child(self, model: Any, name: str, container_id: Optional[str] = None) -> "ViewScope":
        """Scope for a member of this scope's model; view data is copied, not shared."""
        return ViewScope(self.context, model, self.field_name(name), self.view_data, container_id)

    def __repr__(self) -> str:
        return f"ViewScope(model={type(self.model).__name__}, prefix={self.prefix!r})"
