"""
Dynamic List Exceptions

Every error raised by the library derives from DynamicListError. Besides
the message, an error may carry the objects that were in play when it
happened (container id, resolved parameters, the new-item payload, the
per-call options or the additional view data) so they can be inspected
from a debugger or an error page.

Each class declares the HTTP status code used by the exception handler
installed through ``dynamic_vml.main.register_exception_handlers``:
- 400 for validation errors caused by the caller or the browser payload
- 405 when a new-item request reached the handler for the other method
- 500 for configuration and rendering problems
"""

from typing import Any, Optional


class DynamicListError(Exception):
    """Base class for all errors raised while rendering dynamic lists."""

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        container_id: Optional[str] = None,
        parameters: Any = None,
        new_item: Any = None,
        options: Any = None,
        additional_view_data: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.container_id = container_id
        self.parameters = parameters
        self.new_item = new_item
        self.options = options
        self.additional_view_data = additional_view_data


class InvalidEntryError(DynamicListError, ValueError):
    """A list entry without a view model was inserted into a DynamicList."""

    status_code = 400


class MissingConfigurationError(DynamicListError):
    """Neither a registered attribute nor per-call options reached the resolver."""


class NotADynamicListError(DynamicListError, TypeError):
    """The value being rendered is not a DynamicList, or its item type is unknown."""


class MalformedNewItemRequestError(DynamicListError):
    """A new-item payload is missing a required field or carries data it cannot."""

    status_code = 400


class WrongHttpMethodForNewItemError(DynamicListError):
    """A GET payload reached the POST handler, or the other way around."""

    status_code = 405


class TemplateRenderError(DynamicListError):
    """The template engine failed while rendering a list, item or item container."""


class AmbiguousRenderModeError(DynamicListError):
    """The render mode is not one of the ListRenderMode values."""
