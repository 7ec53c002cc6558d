"""
Template Renderer

The boundary between the dynamic list helpers and the template engine.
Helpers only ever ask for "render template X with this scope"; everything
Jinja2-specific lives here.

Template Lookup:
1. The application templates directory (``templates_dir`` argument or
   ``Settings.templates_dir``), so applications can override any default
2. The templates shipped with the package (dynamic_vml/views/templates)

Template names never carry the extension: "EditorTemplates/DynamicList"
is loaded from "EditorTemplates/DynamicList.html".

Every template receives:
- model:     the model of its scope
- view:      its ViewScope (prefix, view data, field name helpers)
- view_data: the scope's view data dictionary
- dvml:      a DynamicListHelper bound to the scope
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import jinja2
from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, StrictUndefined, select_autoescape
from starlette.concurrency import run_in_threadpool

from dynamic_vml.config import get_settings
from dynamic_vml.exceptions import DynamicListError
from dynamic_vml.views.context import ViewScope
from dynamic_vml.views.helpers import DynamicListHelper

logger = logging.getLogger(__name__)

TEMPLATE_EXTENSION = ".html"


@dataclass(frozen=True)
class RenderResult:
    """Outcome of a template render: the HTML, or the error that prevented it."""
    html: str = ""
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TemplateRenderer(Protocol):
    """What the helpers and handlers need from a template engine."""

    def render(self, name: str, model: Any, scope: ViewScope) -> str:
        ...

    async def render_async(self, name: str, model: Any, scope: ViewScope) -> str:
        ...

    async def try_render_async(self, name: str, model: Any, scope: ViewScope) -> RenderResult:
        ...


class JinjaTemplateRenderer:
    """TemplateRenderer backed by a Jinja2 environment."""

    def __init__(self, templates_dir: Optional[str] = None):
        templates_dir = templates_dir or get_settings().templates_dir

        loaders = []
        if templates_dir:
            loaders.append(FileSystemLoader(templates_dir))
        loaders.append(PackageLoader("dynamic_vml", "views/templates"))

        self.templates_dir = templates_dir
        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, name: str, model: Any, scope: ViewScope) -> str:
        """
        Render one template synchronously.

        Args:
            name: Template name without extension
            model: The model of the template
            scope: The scope of the template; its model should be ``model``

        Raises:
            jinja2.TemplateNotFound: no loader knows the template
            Any exception raised by the template or the helpers it calls
        """
        template = self.env.get_template(name + TEMPLATE_EXTENSION)
        return template.render(
            model=model,
            view=scope,
            view_data=scope.view_data,
            dvml=DynamicListHelper(scope, self),
        )

    async def render_async(self, name: str, model: Any, scope: ViewScope) -> str:
        # Templates call back into synchronous helpers, so render off the event loop
        return await run_in_threadpool(self.render, name, model, scope)

    async def try_render_async(self, name: str, model: Any, scope: ViewScope) -> RenderResult:
        """Render without raising; library and template errors become a failed result."""
        try:
            return RenderResult(html=await self.render_async(name, model, scope))
        except (DynamicListError, jinja2.TemplateError) as e:
            logger.warning(f"Rendering template '{name}' failed: {e}")
            return RenderResult(error=e)
