"""pytest configuration and fixtures for dynamic_vml tests."""

import os

import pytest
from fastapi import APIRouter, Depends, Request
from fastapi.testclient import TestClient

from dynamic_vml import (
    AddNewDynamicItem,
    JinjaTemplateRenderer,
    ListRegistry,
    RenderContext,
    Settings,
    ViewScope,
    create_app,
    new_item_from_query,
    partial_view,
    partial_view_async,
    view,
)
from viewmodels import ItemOptions, SimpleItem, SimpleList

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")


@pytest.fixture
def settings():
    """Default settings, ignoring any .env file of the working directory."""
    return Settings(_env_file=None)


@pytest.fixture
def registry():
    """An empty registry, so tests do not depend on import-time registrations."""
    return ListRegistry()


@pytest.fixture
def context(settings):
    return RenderContext(settings=settings)


@pytest.fixture(scope="session")
def renderer():
    return JinjaTemplateRenderer(TEMPLATES_DIR)


@pytest.fixture
def render_page(renderer, settings):
    """Render a page template with a fresh RenderContext, like one request would."""

    def render(name, model, view_data=None):
        scope = ViewScope(RenderContext(settings=settings), model, view_data=view_data)
        return renderer.render(name, model, scope)

    return render


def build_router() -> APIRouter:
    """The sample application's routes."""
    router = APIRouter()

    @router.get("/EditSimple")
    def edit_simple(request: Request):
        return view(request, "EditSimple", SimpleList())

    @router.get("/AddSimpleItem/")
    def add_simple_item(request: Request, parameters: AddNewDynamicItem = Depends(new_item_from_query)):
        return partial_view(request, SimpleItem("new"), parameters)

    @router.post("/AddSimpleItemByPost/")
    async def add_simple_item_by_post(request: Request, parameters: AddNewDynamicItem):
        return await partial_view_async(request, SimpleItem("new"), parameters)

    @router.get("/AddItemWithOptions/")
    def add_item_with_options(request: Request, parameters: AddNewDynamicItem = Depends(new_item_from_query)):
        return partial_view(request, SimpleItem("optioned"), parameters, options=ItemOptions(test_text="hello"))

    @router.post("/AddSimpleItemWrongMethod/")
    def add_simple_item_wrong_method(request: Request, parameters: AddNewDynamicItem):
        return partial_view(request, SimpleItem("new"), parameters)

    @router.get("/AddSimpleItemAsyncByGet/")
    async def add_simple_item_async_by_get(
        request: Request, parameters: AddNewDynamicItem = Depends(new_item_from_query)
    ):
        return await partial_view_async(request, SimpleItem("new"), parameters)

    return router


@pytest.fixture(scope="session")
def client():
    """TestClient over the sample application."""
    app = create_app(build_router(), templates_dir=TEMPLATES_DIR, settings=Settings(_env_file=None))
    with TestClient(app) as test_client:
        yield test_client
