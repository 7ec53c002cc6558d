"""
Pydantic Schemas

These schemas describe the configuration that reaches the resolution
engine and the data exchanged with the browser when a new item is added:

- DynamicListAttribute: declarative configuration registered for a view
  model property (see ``dynamic_vml.services.registry.dynamic_list``)
- DynamicListDisplayOptions / DynamicListEditorOptions: explicit per-call
  options given to ``list_editor_for`` / ``display_list_for``
- AddNewDynamicItem: the new-item payload sent as a query string (GET) or
  as a JSON body (POST)
- NewItemResponse: the JSON answer of the POST new-item handler

Unset fields are None everywhere, so the resolver can tell a value that was
given explicitly from one that should fall through to the next source.

Wire Format:
AddNewDynamicItem uses PascalCase aliases (ContainerId, ItemTemplate, ...)
because those are the field names the client script and the existing
templates exchange. Additional view data travels as a base64 encoded UTF-8
JSON object.
"""

import base64
import json
import logging
import re
from typing import Any, ClassVar, Literal, Mapping, Optional
from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_pascal

from dynamic_vml.exceptions import MalformedNewItemRequestError
from dynamic_vml.models.enums import ListRenderMode, NewItemMethod

logger = logging.getLogger(__name__)

_PERCENT_ESCAPE = re.compile(r"%[0-9A-F]{2}")


def url_encode(value: Optional[str]) -> str:
    """Form-encode a value with lowercase percent escapes (``/`` -> ``%2f``)."""
    if value is None:
        return ""
    encoded = quote_plus(value, safe="!*()")
    return _PERCENT_ESCAPE.sub(lambda match: match.group(0).lower(), encoded)


# ============================================
# Configuration Schemas
# ============================================

class DynamicListAttribute(BaseModel):
    """
    Declarative configuration attached to a view model property.

    Only the fields set here take precedence over per-call options; fields
    left as None fall through to the options, then to inference and
    defaults.
    """
    model_config = ConfigDict(frozen=True)

    list_container_template: Optional[str] = None
    list_template: Optional[str] = None
    item_container_template: Optional[str] = None
    item_template: Optional[str] = None
    editor_templates: Optional[str] = None
    display_templates: Optional[str] = None
    mode: Optional[ListRenderMode] = None
    method: Optional[NewItemMethod] = None


class DynamicListOptions(BaseModel):
    """Template options shared by display and editor calls."""
    item_template: Optional[str] = None
    item_container_template: Optional[str] = None
    list_template: Optional[str] = None
    mode: Optional[ListRenderMode] = None


class DynamicListDisplayOptions(DynamicListOptions):
    """Per-call options of ``display_list_for``."""


class DynamicListEditorOptions(DynamicListOptions):
    """Per-call options of ``list_editor_for``."""
    action_url: Optional[str] = None
    add_new_item_text: Optional[str] = None
    method: Optional[NewItemMethod] = None


# ============================================
# New Item Protocol
# ============================================

class AddNewDynamicItem(BaseModel):
    """
    Parameters needed by the server to render one new list item.

    Built from the resolved list parameters when the list is rendered,
    embedded in the "add item" link, and sent back by the browser when the
    link is clicked. All fields are optional on purpose: the handlers report
    missing fields through MalformedNewItemRequestError instead of a
    generic validation error.
    """
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    container_id: Optional[str] = None
    item_template: Optional[str] = None
    item_container_template: Optional[str] = None
    list_template: Optional[str] = None
    prefix: Optional[str] = None
    mode: ListRenderMode = ListRenderMode.VIEW_MODEL_ONLY
    additional_view_data: Optional[str] = Field(
        None, description="Base64 of the UTF-8 JSON additional view data object"
    )

    # Warn only once, otherwise the log fills up with the same message
    warn_on_dropped_view_data: ClassVar[bool] = True

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lstrip("-").isdigit():
            return int(value)
        return value

    @classmethod
    def create(
        cls,
        container_id: str,
        list_template: str,
        item_container_template: str,
        item_template: str,
        prefix: str,
        mode: ListRenderMode,
        additional_view_data: Optional[Mapping[str, Any]] = None,
    ) -> "AddNewDynamicItem":
        encoded = None
        if additional_view_data is not None:
            raw = json.dumps(dict(additional_view_data), default=str).encode("utf-8")
            encoded = base64.b64encode(raw).decode("ascii")
        return cls(
            container_id=container_id,
            list_template=list_template,
            item_container_template=item_container_template,
            item_template=item_template,
            prefix=prefix,
            mode=mode,
            additional_view_data=encoded,
        )

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> "AddNewDynamicItem":
        """Build the payload from the query parameters of a GET request."""
        try:
            return cls.model_validate(dict(query))
        except ValidationError as e:
            raise MalformedNewItemRequestError(
                f"The new item request query string could not be parsed: {e}"
            ) from e

    def to_query_string(self, policy: Literal["warn", "raise"] = "warn") -> str:
        """
        Encode the payload as the query string of a GET new-item request.

        Additional view data is never included. With ``policy="raise"`` its
        presence is an error; with ``policy="warn"`` it is dropped and a
        warning is logged the first time it happens.
        """
        if self.additional_view_data:
            message = (
                "Additional view data cannot be sent over GET, so the data present in "
                "AddNewDynamicItem will be ignored. If you do not want this behavior, "
                "pass method=NewItemMethod.POST to list_editor_for()."
            )
            if policy == "raise":
                raise MalformedNewItemRequestError(
                    message, container_id=self.container_id, new_item=self
                )
            if AddNewDynamicItem.warn_on_dropped_view_data:
                logger.warning(message)
                AddNewDynamicItem.warn_on_dropped_view_data = False

        return (
            f"?ContainerId={self.container_id or ''}"
            f"&ListTemplate={url_encode(self.list_template)}"
            f"&ItemContainerTemplate={url_encode(self.item_container_template)}"
            f"&ItemTemplate={url_encode(self.item_template)}"
            f"&Prefix={self.prefix or ''}"
            f"&Mode={int(self.mode)}"
        )

    def to_json(self) -> str:
        """Encode the payload as the JSON body of a POST new-item request."""
        return self.model_dump_json(by_alias=True)

    def get_additional_view_data(self) -> dict[str, Any]:
        """Decode the additional view data (empty dict when absent)."""
        if not self.additional_view_data:
            return {}
        try:
            raw = base64.b64decode(self.additional_view_data, validate=True)
            data = json.loads(raw.decode("utf-8"))
        except ValueError as e:
            raise MalformedNewItemRequestError(
                f"The AdditionalViewData field of the new item request is not valid base64 JSON: {e}",
                container_id=self.container_id,
                new_item=self,
            ) from e
        if not isinstance(data, dict):
            raise MalformedNewItemRequestError(
                "The AdditionalViewData field of the new item request must encode a JSON object.",
                container_id=self.container_id,
                new_item=self,
            )
        return data

    def missing_fields(self) -> list[str]:
        """Names of the required fields that are absent, in wire casing."""
        required = {
            "ContainerId": self.container_id,
            "ItemTemplate": self.item_template,
            "ItemContainerTemplate": self.item_container_template,
            "Prefix": self.prefix,
        }
        return [name for name, value in required.items() if value is None]


class NewItemResponse(BaseModel):
    """JSON body returned by the POST new-item handler."""
    success: bool
    html: str
