"""
Dynamic View Model Lists - Application Wiring

Builds (or extends) a FastAPI application so it can render dynamic lists
and answer the "add item" requests of the client script.

    from dynamic_vml.main import create_app
    app = create_app(books_router, templates_dir="templates")

What create_app() sets up:
- The level of the dynamic_vml loggers from Settings.log_level (handlers
  and the root logger are left to the application)
- app.state.renderer: the JinjaTemplateRenderer used by partial_view,
  partial_view_async and view (see get_renderer)
- dvml.js served under Settings.static_url (e.g. /dvml/dvml.js)
- An exception handler turning DynamicListError into a JSON error body
  with the status code of the error class
- The application routers given as arguments

Applications that build their own FastAPI instance can call
register_exception_handlers() and set app.state.renderer themselves.
"""

import logging
import os
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from dynamic_vml.config import Settings, get_settings
from dynamic_vml.exceptions import DynamicListError
from dynamic_vml.views.templates import JinjaTemplateRenderer

logger = logging.getLogger(__name__)

static_path = os.path.join(os.path.dirname(__file__), "views", "static")


def register_exception_handlers(app: FastAPI) -> None:
    """Convert DynamicListError into {"error": <class name>, "detail": <message>}."""

    @app.exception_handler(DynamicListError)
    async def dynamic_list_error_handler(request: Request, exc: DynamicListError):
        logger.warning(f"{request.method} {request.url.path} failed with {type(exc).__name__}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": type(exc).__name__, "detail": exc.message},
        )


def create_app(
    *routers: APIRouter,
    templates_dir: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create a FastAPI application ready to render dynamic lists.

    Args:
        routers: Application routers to include
        templates_dir: Application templates, searched before the package
            defaults (falls back to Settings.templates_dir)
        settings: Defaults to get_settings()
    """
    settings = settings or get_settings()
    logging.getLogger("dynamic_vml").setLevel(settings.log_level)

    app = FastAPI(
        title="Dynamic View Model Lists",
        description="Editable lists of view models with add/remove items",
        version="1.0.0",
    )
    app.state.renderer = JinjaTemplateRenderer(templates_dir or settings.templates_dir)

    # Serve the client script next to the application's own assets
    app.mount(settings.static_url, StaticFiles(directory=static_path), name="dvml")

    register_exception_handlers(app)

    for router in routers:
        app.include_router(router)

    return app
