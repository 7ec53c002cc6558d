"""
Models Package - Lists, Schemas and Parameters

This package contains the data structures of the library:
- entities.py: DynamicList and DynamicListItem, the objects view models hold
- schemas.py: Pydantic configuration records and the new-item wire payload
- parameters.py: Immutable render parameters produced by the resolver
- enums.py: Render modes, new-item methods and render kinds
"""

from dynamic_vml.models.enums import ListRenderMode, NewItemMethod, RenderKind
from dynamic_vml.models.entities import DynamicList, DynamicListItem
from dynamic_vml.models.schemas import (
    AddNewDynamicItem,
    DynamicListAttribute,
    DynamicListDisplayOptions,
    DynamicListEditorOptions,
    DynamicListOptions,
    NewItemResponse,
)
from dynamic_vml.models.parameters import (
    ItemDisplayParameters,
    ItemEditorParameters,
    ItemParameters,
    ListDisplayParameters,
    ListEditorParameters,
    ListParameters,
)

__all__ = [
    # Enums
    "ListRenderMode",
    "NewItemMethod",
    "RenderKind",
    # Entities
    "DynamicList",
    "DynamicListItem",
    # Schemas
    "AddNewDynamicItem",
    "DynamicListAttribute",
    "DynamicListDisplayOptions",
    "DynamicListEditorOptions",
    "DynamicListOptions",
    "NewItemResponse",
    # Parameters
    "ItemDisplayParameters",
    "ItemEditorParameters",
    "ItemParameters",
    "ListDisplayParameters",
    "ListEditorParameters",
    "ListParameters",
]
