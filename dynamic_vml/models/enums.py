"""
Enumerations shared by the list model, the resolution engine and the
new-item wire protocol.

ListRenderMode and NewItemMethod are IntEnums because their integer value
travels over the wire (the ``Mode`` query parameter and JSON field).
"""

from enum import Enum, IntEnum


class ListRenderMode(IntEnum):
    """
    Which model the final, user-provided item template receives.

    - VIEW_MODEL_ONLY: the template gets the view model itself
      (e.g. a ``BookViewModel``).
    - VIEW_MODEL_WITH_OPTIONS: the template gets the whole list entry, so it
      can read per-item option fields next to ``entry.view_model``.
    """
    VIEW_MODEL_ONLY = 0
    VIEW_MODEL_WITH_OPTIONS = 1


class NewItemMethod(IntEnum):
    """
    HTTP method used by the browser to request a new list item.

    Additional view data is never sent over GET since it may be too long
    for a query string. Use POST when a list carries additional view data.
    """
    GET = 0
    POST = 1


class RenderKind(str, Enum):
    """Whether a list is being rendered for display or for editing."""
    DISPLAY = "display"
    EDITOR = "editor"
