"""
Render Parameters

Immutable value objects produced by the resolution engine. They are created
once per list (or item) per render pass, cached in the RenderContext, read
by the templates and discarded with the response.

    ListParameters          templates, field prefix and mode of one list
    ListDisplayParameters   ListParameters + additional view data
    ListEditorParameters    ... + action url, add link text and HTTP method
    ItemDisplayParameters   item index + the owning ListDisplayParameters
    ItemEditorParameters    item index + the owning ListEditorParameters

Parameters rebuilt from a new-item payload are partial: list_template,
action_url and add_new_item_text are empty because nothing past the item
container level needs them.
"""

from dataclasses import dataclass
from typing import Any, Literal, Optional

from dynamic_vml.exceptions import DynamicListError
from dynamic_vml.models.enums import ListRenderMode, NewItemMethod
from dynamic_vml.models.schemas import AddNewDynamicItem


@dataclass(frozen=True, kw_only=True)
class ListParameters:
    container_id: str
    item_template: str
    item_container_template: str
    list_template: str
    prefix: str
    mode: ListRenderMode


@dataclass(frozen=True, kw_only=True)
class ListDisplayParameters:
    list: ListParameters
    additional_view_data: Optional[dict[str, Any]] = None

    @property
    def container_id(self) -> str:
        return self.list.container_id


@dataclass(frozen=True, kw_only=True)
class ListEditorParameters(ListDisplayParameters):
    action_url: str = ""
    add_new_item_text: str = ""
    method: NewItemMethod = NewItemMethod.GET

    def item_create_parameters(self) -> AddNewDynamicItem:
        """Payload the browser sends back to request a new item of this list."""
        return AddNewDynamicItem.create(
            container_id=self.list.container_id,
            list_template=self.list.list_template,
            item_container_template=self.list.item_container_template,
            item_template=self.list.item_template,
            prefix=self.list.prefix,
            mode=self.list.mode,
            additional_view_data=self.additional_view_data,
        )

    def action_info(self, policy: Literal["warn", "raise"] = "warn") -> str:
        """
        Instruction string passed to the client script's ``dvml.add``.

        ``<action_url>/?ContainerId=...`` for GET, or
        ``POST|<action_url>|<json>`` for POST. Empty when the list has no
        action url (e.g. parameters rebuilt from a new-item payload).
        """
        if not self.action_url:
            return ""
        new_item = self.item_create_parameters()
        if self.method == NewItemMethod.GET:
            return f"{self.action_url}/{new_item.to_query_string(policy)}"
        if self.method == NewItemMethod.POST:
            return f"POST|{self.action_url}|{new_item.to_json()}"
        raise DynamicListError(
            f"Unsupported NewItemMethod {self.method!r}.",
            container_id=self.list.container_id,
            parameters=self,
        )


@dataclass(frozen=True, kw_only=True)
class ItemParameters:
    container_id: str
    index: str
    additional_view_data: Optional[dict[str, Any]] = None


@dataclass(frozen=True, kw_only=True)
class ItemDisplayParameters(ItemParameters):
    display: ListDisplayParameters

    @property
    def list(self) -> ListParameters:
        return self.display.list


@dataclass(frozen=True, kw_only=True)
class ItemEditorParameters(ItemParameters):
    editor: ListEditorParameters
    new_item: Optional[AddNewDynamicItem] = None

    @property
    def list(self) -> ListParameters:
        return self.editor.list

    @property
    def add_new_item(self) -> AddNewDynamicItem:
        """The payload this item was created from, or the one its list would send."""
        if self.new_item is not None:
            return self.new_item
        return self.editor.item_create_parameters()
