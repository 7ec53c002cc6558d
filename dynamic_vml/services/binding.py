"""
Form Binding

Rebuilds a DynamicList from the fields of a submitted editor form. The
default editor templates post, for a list rendered at prefix "Books":

    Books.ContainerId                 the container id of the list
    Books.Index                       one value per item key
    Books[<key>].ViewModel.<field>    the fields of each item's view model
    Books[<key>].<field>              per-item option fields (custom entries)

Usage in a FastAPI route:

    form = await request.form()
    author.books = bind_dynamic_list(form, "Books", lambda data: BookViewModel(**data))

Only direct fields of the view model are collected; nested lists inside
items are bound by calling bind_dynamic_list again with their own prefix.
"""

import dataclasses
from typing import Any, Callable, Iterable, Mapping, Optional

from dynamic_vml.models.entities import DynamicList
from dynamic_vml.views.context import html_field_name


def _first(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _getlist(form: Mapping[str, Any], key: str) -> list[Any]:
    if hasattr(form, "getlist"):
        return list(form.getlist(key))
    value = form.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _items(form: Mapping[str, Any]) -> Iterable[tuple[str, Any]]:
    if hasattr(form, "multi_items"):
        return form.multi_items()
    return ((key, _first(value)) for key, value in form.items())


def bind_dynamic_list(
    form: Mapping[str, Any],
    prefix: str,
    view_model_factory: Callable[[dict[str, Any]], Any],
    list_type: type = DynamicList,
    entry_type: Optional[type] = None,
) -> DynamicList:
    """
    Bind the DynamicList posted under ``prefix``.

    Args:
        form: Starlette FormData (or any mapping; list values are accepted)
        prefix: Field prefix the list was rendered with (e.g. "Books")
        view_model_factory: Builds a view model from the dict of its posted fields
        list_type: DynamicList (sub)class to create
        entry_type: Entry class to create; defaults to the list's entry_type

    Returns:
        The bound list, with the posted container id and item keys. Keys
        posted twice are bound once (the last one wins).
    """
    container_ids = _getlist(form, html_field_name(prefix, "ContainerId"))
    result = list_type(container_id=container_ids[0] if container_ids else None)
    entry_type = entry_type or result.entry_type
    option_fields = {field.name for field in dataclasses.fields(entry_type)} - {"view_model", "index"}

    fields = list(_items(form))
    for key in _getlist(form, html_field_name(prefix, "Index")):
        item_prefix = html_field_name(prefix, f"[{key}]") + "."
        view_model_prefix = item_prefix + "ViewModel."

        values: dict[str, Any] = {}
        options: dict[str, Any] = {}
        for name, value in fields:
            if name.startswith(view_model_prefix):
                field = name[len(view_model_prefix):]
                if field and "." not in field and "[" not in field:
                    values.setdefault(field, value)
            elif name.startswith(item_prefix):
                field = name[len(item_prefix):]
                if field in option_fields:
                    options.setdefault(field, value)

        result.add(entry_type(view_model=view_model_factory(values), index=key, **options))
    return result
