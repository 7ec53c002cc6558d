"""
Dynamic List Entities

These are the objects your view models hold in place of plain lists:

    class AuthorViewModel:
        def __init__(self):
            self.name = ""
            self.books = DynamicList(item_type=BookViewModel)

A DynamicList is a dictionary of entries keyed by an HTML-friendly string.
The key of each entry is also the id of the div that holds the entry in the
rendered form, which is what lets the browser add and remove items without
renumbering positional indices, and lets the form binder rebuild the list
from the submitted fields.

Upsert Semantics:
Adding an entry whose index already exists replaces the existing entry
instead of failing. The form binder relies on this: a re-submitted form can
contain the same key twice and must still bind.

Custom Options:
Per-item fields other than the view model are declared by subclassing
DynamicListItem (it is a dataclass), e.g.

    @dataclass
    class BookOptions(DynamicListItem):
        highlighted: bool = False
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from dynamic_vml.exceptions import InvalidEntryError
from dynamic_vml.services.ids import create_id


@dataclass
class DynamicListItem:
    """
    One entry of a DynamicList.

    Attributes:
        view_model: The user view model rendered by the item template
        index: Unique key of the entry; generated on insertion when empty
    """
    view_model: Any = None
    index: Optional[str] = None


class DynamicList:
    """
    A list of view models keyed by the id of their HTML elements.

    Attributes:
        container_id: Id of the div containing the whole list. Generated once
            and stable for the lifetime of the list unless set explicitly.
        item_type: The view model type held by the list, used to infer the
            item template name, the add action and the add link text.
        entry_type: Entry class used when wrapping bare view models.
        index: Key of the most recently inserted entry (binder support).
    """

    item_type: Optional[type] = None
    entry_type: type = DynamicListItem

    def __init__(
        self,
        container_id: Optional[str] = None,
        item_type: Optional[type] = None,
        entry_type: Optional[type] = None,
    ):
        self._entries: dict[str, DynamicListItem] = {}
        self.container_id = container_id or create_id()
        self.index: Optional[str] = None
        if item_type is not None:
            self.item_type = item_type
        if entry_type is not None:
            self.entry_type = entry_type

    # ============================================
    # Insertion
    # ============================================

    def add(
        self,
        item: Any,
        index: Optional[str] = None,
        options: Optional[Callable[[DynamicListItem], None]] = None,
    ) -> DynamicListItem:
        """
        Insert an entry or a bare view model and return the stored entry.

        Bare view models are wrapped in a new ``entry_type`` instance, to which
        the optional ``options`` mutator is applied (e.g. to set its index or
        custom option fields). Entries without an index receive a new one;
        entries with an existing index replace the stored entry.
        """
        if isinstance(item, DynamicListItem):
            entry = item
        else:
            entry = self.entry_type(view_model=item)
            if options is not None:
                options(entry)

        if index is not None:
            entry.index = index

        if entry.view_model is None:
            raise InvalidEntryError(
                "Tried to add an entry with no associated view model to the list. "
                "Make sure every entry added to a DynamicList has a view_model.",
                container_id=self.container_id,
            )

        if not entry.index:
            entry.index = create_id()

        if entry.index not in self._entries:
            self.index = entry.index
        self._entries[entry.index] = entry
        return entry

    def add_range(
        self,
        items: Iterable[Any],
        options: Optional[Callable[[Any], DynamicListItem]] = None,
    ) -> None:
        """
        Insert several entries or view models.

        When ``options`` is given it is called with each view model and must
        return the entry to store; the view model is attached to it.
        """
        for item in items:
            if options is not None and not isinstance(item, DynamicListItem):
                entry = options(item)
                entry.view_model = item
                self.add(entry)
            else:
                self.add(item)

    # ============================================
    # Lookup and removal
    # ============================================

    def get(self, index: str) -> DynamicListItem:
        """Return the entry stored under ``index`` (KeyError when absent)."""
        return self._entries[index]

    def remove(self, item: Union[str, DynamicListItem]) -> bool:
        """Remove an entry by index or by entry; False when it was absent."""
        index = item.index if isinstance(item, DynamicListItem) else item
        if index is None or index not in self._entries:
            return False
        del self._entries[index]
        return True

    def contains(self, item: Union[str, DynamicListItem]) -> bool:
        index = item.index if isinstance(item, DynamicListItem) else item
        return index is not None and index in self._entries

    def clear(self) -> None:
        self._entries.clear()

    # ============================================
    # Views over the entries
    # ============================================

    def keys(self) -> list[str]:
        return list(self._entries.keys())

    def values(self) -> list[DynamicListItem]:
        return list(self._entries.values())

    @property
    def options(self) -> list[DynamicListItem]:
        """All entries, including their per-item option fields."""
        return self.values()

    @property
    def view_models(self) -> list[Any]:
        return [entry.view_model for entry in self._entries.values() if entry.view_model is not None]

    @property
    def count(self) -> int:
        return len(self._entries)

    def to_model(self, func: Callable[[Any], Any], entries: bool = False) -> Iterator[Any]:
        """
        Lazily convert the list to other models (e.g. database entities).

        ``func`` receives each view model, or each entry when ``entries`` is
        True. Nothing is evaluated until the returned iterator is consumed.
        """
        source = self._entries.values() if entries else self.view_models
        return (func(value) for value in source)

    # ============================================
    # Python protocol
    # ============================================

    def __getitem__(self, index: str) -> DynamicListItem:
        return self.get(index)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, (str, DynamicListItem)):
            return self.contains(item)
        return False

    def __iter__(self) -> Iterator[DynamicListItem]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(container_id={self.container_id!r}, count={len(self)})"
