"""
Controllers Package - The 'C' in MVC

Helpers called from the application's own FastAPI routes:
- new_item.py: partial_view / partial_view_async answer the "add item"
  requests sent by the client script, plus the request dependencies
- pages.py: view renders a whole page template holding dynamic lists

Unlike a typical controllers package this one defines no APIRouter: the
URLs of the "add item" actions belong to the application.
"""

from dynamic_vml.controllers.new_item import get_renderer, new_item_from_query, partial_view, partial_view_async
from dynamic_vml.controllers.pages import view

__all__ = ["get_renderer", "new_item_from_query", "partial_view", "partial_view_async", "view"]
