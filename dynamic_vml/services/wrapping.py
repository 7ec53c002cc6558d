"""
Wrapping helpers

Turn bare view models, or domain models plus selector functions, into
DynamicLists. Typical uses are building the list of an edit page from
database rows, and building the single-entry list of a new item:

    books = wrap_many(author.books, view_model_selector=BookViewModel.from_entity)
    item = wrap_single(BookViewModel(), container_id, options=lambda o: ...)

These are pure transformations; nothing is kept between calls.
"""

from typing import Any, Callable, Iterable, Optional, Union

from dynamic_vml.models.entities import DynamicList, DynamicListItem

Options = Union[DynamicListItem, Callable[[DynamicListItem], None], None]


def _make_entry(
    model: Any,
    view_model_selector: Optional[Callable[[Any], Any]],
    options_selector: Optional[Callable[[Any], DynamicListItem]],
    options: Options,
    entry_type: type,
) -> DynamicListItem:
    view_model = view_model_selector(model) if view_model_selector else model

    if options_selector is not None:
        entry = options_selector(model)
    elif isinstance(options, DynamicListItem):
        entry = options
    else:
        entry = entry_type()

    if callable(options) and not isinstance(options, DynamicListItem):
        options(entry)

    entry.view_model = view_model
    return entry


def wrap_single(
    model: Any,
    container_id: Optional[str] = None,
    *,
    view_model_selector: Optional[Callable[[Any], Any]] = None,
    options_selector: Optional[Callable[[Any], DynamicListItem]] = None,
    options: Options = None,
    entry_type: type = DynamicListItem,
    item_type: Optional[type] = None,
) -> DynamicList:
    """
    Wrap one model in a single-entry DynamicList.

    Args:
        model: A view model, or a domain model when view_model_selector is given
        container_id: Container id of the new list (generated when omitted)
        view_model_selector: Converts ``model`` to its view model
        options_selector: Builds the entry (with its option fields) from ``model``
        options: An entry instance to use, or a mutator applied to the new entry
        entry_type: Entry class created when no entry is supplied
        item_type: View model type recorded on the list
    """
    entry = _make_entry(model, view_model_selector, options_selector, options, entry_type)
    result = DynamicList(container_id=container_id, item_type=item_type, entry_type=type(entry))
    result.add(entry)
    return result


def wrap_many(
    models: Iterable[Any],
    container_id: Optional[str] = None,
    *,
    view_model_selector: Optional[Callable[[Any], Any]] = None,
    options_selector: Optional[Callable[[Any], DynamicListItem]] = None,
    options: Optional[Callable[[DynamicListItem], None]] = None,
    entry_type: type = DynamicListItem,
    item_type: Optional[type] = None,
) -> DynamicList:
    """Wrap several models in a DynamicList, one entry per model (see wrap_single)."""
    result = DynamicList(container_id=container_id, item_type=item_type, entry_type=entry_type)
    for model in models:
        result.add(_make_entry(model, view_model_selector, options_selector, options, entry_type))
    return result
