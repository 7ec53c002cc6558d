"""
New Item Controller Helpers

Server side of the "add item" link. The browser sends back the
AddNewDynamicItem produced when the list was rendered, the application's
action builds a fresh view model, and these helpers render it inside an
item container so the client script can append it to the list.

    @router.get("/AddBook")
    def add_book(request: Request, parameters: AddNewDynamicItem = Depends(new_item_from_query)):
        return partial_view(request, BookViewModel(), parameters)

    @router.post("/AddBook")
    async def add_book_by_post(request: Request, parameters: AddNewDynamicItem):
        return await partial_view_async(request, BookViewModel(), parameters)

GET vs POST:
- partial_view answers GET requests with the item HTML as the body. The
  payload comes from the query string and can never carry additional view
  data.
- partial_view_async answers POST requests with {"success", "html"}. The
  payload is the JSON body and may carry additional view data, which is
  made available to the item templates as ``view_data``.
Calling one helper for the other method raises
WrongHttpMethodForNewItemError (405).
"""

import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse, JSONResponse

from dynamic_vml.exceptions import (
    DynamicListError,
    MalformedNewItemRequestError,
    TemplateRenderError,
    WrongHttpMethodForNewItemError,
)
from dynamic_vml.models.entities import DynamicListItem
from dynamic_vml.models.enums import NewItemMethod, RenderKind
from dynamic_vml.models.schemas import AddNewDynamicItem, NewItemResponse
from dynamic_vml.services.resolution import ParameterResolver
from dynamic_vml.services.wrapping import Options, wrap_single
from dynamic_vml.views.context import RenderContext, ViewScope
from dynamic_vml.views.helpers import item_templates_folder
from dynamic_vml.views.templates import TemplateRenderer

logger = logging.getLogger(__name__)


# ============================================
# Dependencies
# ============================================

def new_item_from_query(request: Request) -> AddNewDynamicItem:
    """FastAPI dependency parsing the new-item payload of a GET request."""
    return AddNewDynamicItem.from_query(request.query_params)


def get_renderer(request: Request) -> TemplateRenderer:
    """FastAPI dependency returning the renderer installed by create_app()."""
    return request.app.state.renderer


# ============================================
# Rendering
# ============================================

def _prepare(
    view_model: Any,
    parameters: Optional[AddNewDynamicItem],
    options: Options,
    entry_type: type,
    method: NewItemMethod,
) -> tuple[str, DynamicListItem, ViewScope]:
    """Wrap the view model and stage its parameters; returns (template, entry, scope)."""
    if parameters is None:
        raise MalformedNewItemRequestError(
            "No AddNewDynamicItem payload was received. GET actions should depend on "
            "new_item_from_query; POST actions should declare it as the JSON body."
        )

    context = RenderContext()
    new_list = wrap_single(view_model, parameters.container_id, options=options, entry_type=entry_type)
    entry = new_list.get(new_list.index)

    item = ParameterResolver(context).resolve_new_item_parameters(entry.index, parameters, method)
    scope = ViewScope(
        context,
        entry,
        prefix=f"{item.list.prefix}[{entry.index}]",
        view_data=item.additional_view_data,
        container_id=item.container_id,
    )
    folder = item_templates_folder(item, RenderKind.EDITOR, context.settings)
    return f"{folder}/{item.list.item_container_template}", entry, scope


def partial_view(
    request: Request,
    view_model: Any,
    parameters: Optional[AddNewDynamicItem],
    options: Options = None,
    renderer: Optional[TemplateRenderer] = None,
    entry_type: type = DynamicListItem,
) -> HTMLResponse:
    """
    Render a new item for a GET "add item" request.

    Args:
        request: The current request (its method is checked)
        view_model: The new view model to render
        parameters: The payload parsed from the query string
        options: A DynamicListItem (subclass) instance to use as the entry, or
            a callable applied to the new entry to set its option fields
        renderer: Defaults to the renderer installed on the application
        entry_type: Entry class created when ``options`` is not an instance

    Returns:
        HTMLResponse with the item container HTML

    Raises:
        WrongHttpMethodForNewItemError: the request is not a GET
        MalformedNewItemRequestError: the payload is incomplete, or carries
            additional view data (which only POST can send)
    """
    if request.method != "GET":
        raise WrongHttpMethodForNewItemError(
            f"partial_view() handles GET new-item requests, but this request is a {request.method}. "
            "Use partial_view_async() in actions that receive NewItemMethod.POST requests.",
            new_item=parameters,
        )
    if parameters is not None and parameters.additional_view_data:
        raise MalformedNewItemRequestError(
            "The new item request carries additional view data, which cannot be sent over GET. "
            "Render the list with method=NewItemMethod.POST and use partial_view_async().",
            container_id=parameters.container_id,
            new_item=parameters,
        )

    renderer = renderer or get_renderer(request)
    name, entry, scope = _prepare(view_model, parameters, options, entry_type, NewItemMethod.GET)
    try:
        html = renderer.render(name, entry, scope)
    except DynamicListError:
        raise
    except Exception as e:
        logger.error(f"Failed to render new item '{entry.index}' with template '{name}': {e}")
        raise TemplateRenderError(
            f"An error occurred while rendering the new item template '{name}': {e}",
            container_id=parameters.container_id,
            new_item=parameters,
        ) from e
    return HTMLResponse(html)


async def partial_view_async(
    request: Request,
    view_model: Any,
    parameters: Optional[AddNewDynamicItem],
    options: Options = None,
    renderer: Optional[TemplateRenderer] = None,
    entry_type: type = DynamicListItem,
) -> JSONResponse:
    """
    Render a new item for a POST "add item" request.

    Same arguments as partial_view. Template failures do not raise: they are
    reported as ``{"success": false, "html": <message>}``.

    Raises:
        WrongHttpMethodForNewItemError: the request is not a POST
        MalformedNewItemRequestError: the payload is incomplete
    """
    if request.method != "POST":
        raise WrongHttpMethodForNewItemError(
            f"partial_view_async() handles POST new-item requests, but this request is a {request.method}. "
            "Use partial_view() in actions that receive NewItemMethod.GET requests.",
            new_item=parameters,
        )

    renderer = renderer or get_renderer(request)
    name, entry, scope = _prepare(view_model, parameters, options, entry_type, NewItemMethod.POST)
    result = await renderer.try_render_async(name, entry, scope)
    if not result.ok:
        logger.warning(f"Rendering new item '{entry.index}' of '{parameters.container_id}' failed: {result.error}")
        response = NewItemResponse(
            success=False,
            html=(
                f"The new item could not be rendered: {result.error}. If the item template needs "
                "option fields, make sure to pass the options object (or entry_type) to partial_view_async()."
            ),
        )
    else:
        response = NewItemResponse(success=True, html=result.html)
    return JSONResponse(response.model_dump())
