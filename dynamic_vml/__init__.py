"""
Dynamic View Model Lists

Editable lists of view models for server-rendered FastAPI forms. A view
model holds a DynamicList; page templates render it with
``dvml.list_editor_for('books')``; the client script (dvml.js) adds items
by calling back an application action that answers with partial_view or
partial_view_async; submitted forms are bound back with bind_dynamic_list.

Layout:
- models/: DynamicList, schemas, render parameters, enums
- services/: ids, registry, resolution, wrapping, binding
- views/: render context, template renderer, template helper, templates
- controllers/: new-item handlers and page rendering
- config.py, exceptions.py, main.py
"""

from dynamic_vml.config import Settings, get_settings
from dynamic_vml.controllers import get_renderer, new_item_from_query, partial_view, partial_view_async, view
from dynamic_vml.exceptions import (
    AmbiguousRenderModeError,
    DynamicListError,
    InvalidEntryError,
    MalformedNewItemRequestError,
    MissingConfigurationError,
    NotADynamicListError,
    TemplateRenderError,
    WrongHttpMethodForNewItemError,
)
from dynamic_vml.main import create_app, register_exception_handlers
from dynamic_vml.models import (
    AddNewDynamicItem,
    DynamicList,
    DynamicListAttribute,
    DynamicListDisplayOptions,
    DynamicListEditorOptions,
    DynamicListItem,
    ListRenderMode,
    NewItemMethod,
    RenderKind,
)
from dynamic_vml.services.binding import bind_dynamic_list
from dynamic_vml.services.ids import create_id
from dynamic_vml.services.registry import ListRegistry, default_registry, dynamic_list
from dynamic_vml.services.wrapping import wrap_many, wrap_single
from dynamic_vml.views.context import RenderContext, ViewScope
from dynamic_vml.views.templates import JinjaTemplateRenderer, RenderResult, TemplateRenderer

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Models
    "AddNewDynamicItem",
    "DynamicList",
    "DynamicListAttribute",
    "DynamicListDisplayOptions",
    "DynamicListEditorOptions",
    "DynamicListItem",
    "ListRenderMode",
    "NewItemMethod",
    "RenderKind",
    # Services
    "ListRegistry",
    "bind_dynamic_list",
    "create_id",
    "default_registry",
    "dynamic_list",
    "wrap_many",
    "wrap_single",
    # Views
    "JinjaTemplateRenderer",
    "RenderContext",
    "RenderResult",
    "TemplateRenderer",
    "ViewScope",
    # Controllers
    "get_renderer",
    "new_item_from_query",
    "partial_view",
    "partial_view_async",
    "view",
    # Application
    "create_app",
    "register_exception_handlers",
    # Errors
    "AmbiguousRenderModeError",
    "DynamicListError",
    "InvalidEntryError",
    "MalformedNewItemRequestError",
    "MissingConfigurationError",
    "NotADynamicListError",
    "TemplateRenderError",
    "WrongHttpMethodForNewItemError",
]
