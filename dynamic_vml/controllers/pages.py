"""
Page rendering

Renders a full page template for an application view model. Every page
render gets its own RenderContext, so nothing resolved for one request is
visible to another.
"""

from typing import Any, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse

from dynamic_vml.controllers.new_item import get_renderer
from dynamic_vml.views.context import RenderContext, ViewScope
from dynamic_vml.views.templates import TemplateRenderer


def view(
    request: Request,
    name: str,
    model: Any,
    renderer: Optional[TemplateRenderer] = None,
    view_data: Optional[dict[str, Any]] = None,
) -> HTMLResponse:
    """Render the page template ``name`` with ``model`` at the root field prefix."""
    renderer = renderer or get_renderer(request)
    scope = ViewScope(RenderContext(), model, prefix="", view_data=view_data)
    return HTMLResponse(renderer.render(name, model, scope))
