"""
Identifier Generator

Creates the keys used both as dictionary keys of a DynamicList and as the
``id`` attribute of the HTML elements that hold each list and list item.

A 128-bit random UUID is base64 encoded (24 characters) and stripped of the
characters that are not valid inside an HTML id or a CSS selector
(``/``, ``+`` and the ``=`` padding), leaving roughly 20-22 characters.
"""

import base64
import re
import uuid

_UNSAFE_CHARACTERS = re.compile(r"[/+=]")


def create_id() -> str:
    """Return a new collision-resistant, HTML-id-safe identifier."""
    encoded = base64.b64encode(uuid.uuid4().bytes).decode("ascii")
    return _UNSAFE_CHARACTERS.sub("", encoded)
