"""Tests for DynamicList and DynamicListItem."""

import pytest

from dynamic_vml import DynamicList, DynamicListItem, InvalidEntryError
from viewmodels import ItemOptions, SimpleItem


def test_container_id_is_generated_and_stable():
    """Test a list gets a container id once and keeps it."""
    items = DynamicList()
    first = items.container_id
    items.add(SimpleItem("a"))
    assert first
    assert items.container_id == first
    assert DynamicList("explicit").container_id == "explicit"


def test_add_wraps_view_model_and_generates_index():
    """Test adding a bare view model creates an entry with a fresh index."""
    items = DynamicList()
    entry = items.add(SimpleItem("a"))

    assert isinstance(entry, DynamicListItem)
    assert entry.index
    assert entry.view_model == SimpleItem("a")
    assert items[entry.index] is entry
    assert items.index == entry.index


def test_add_with_existing_index_replaces_entry():
    """Test inserting an existing key is an upsert, never an error."""
    items = DynamicList()
    items.add(SimpleItem("a"), index="K")
    items.add(SimpleItem("b"), index="K")

    assert len(items) == 1
    assert items["K"].view_model.item_property == "b"


def test_add_entry_without_view_model_fails():
    """Test an entry with no view model is rejected."""
    items = DynamicList("C")
    with pytest.raises(InvalidEntryError) as e:
        items.add(DynamicListItem())
    assert isinstance(e.value, ValueError)
    assert e.value.container_id == "C"


def test_add_applies_options_mutator_to_new_entry():
    """Test the options callable sets custom fields on the created entry."""
    items = DynamicList(entry_type=ItemOptions)

    def configure(entry):
        entry.test_text = "hi"
        entry.index = "X"

    entry = items.add(SimpleItem("a"), options=configure)
    assert isinstance(entry, ItemOptions)
    assert entry.test_text == "hi"
    assert items.keys() == ["X"]


def test_add_range_with_selector():
    """Test add_range builds entries with the selector and attaches each view model."""
    items = DynamicList()
    items.add_range(
        [SimpleItem("a"), SimpleItem("b")],
        options=lambda vm: ItemOptions(test_text=vm.item_property.upper()),
    )

    assert [entry.test_text for entry in items] == ["A", "B"]
    assert [vm.item_property for vm in items.view_models] == ["a", "b"]


def test_remove_and_contains():
    """Test removal by key or by entry reports whether something was removed."""
    items = DynamicList()
    first = items.add(SimpleItem("a"), index="A")
    items.add(SimpleItem("b"), index="B")

    assert "A" in items
    assert first in items
    assert 42 not in items
    assert items.remove(first) is True
    assert items.remove("A") is False
    assert items.remove("B") is True
    assert items.count == 0


def test_keys_keep_insertion_order():
    """Test keys are listed in insertion order and clear empties the list."""
    items = DynamicList()
    for key in ("z", "a", "m"):
        items.add(SimpleItem(key), index=key)
    assert items.keys() == ["z", "a", "m"]

    items.clear()
    assert items.keys() == []


def test_to_model_is_lazy():
    """Test to_model converts only when iterated."""
    items = DynamicList()
    items.add(SimpleItem("a"), index="A")
    calls = []

    def convert(vm):
        calls.append(vm)
        return vm.item_property

    converted = items.to_model(convert)
    assert calls == []
    assert list(converted) == ["a"]
    assert [entry.index for entry in items.to_model(lambda e: e, entries=True)] == ["A"]


def test_options_lists_entries():
    """Test options exposes the entries with their option fields."""
    items = DynamicList(entry_type=ItemOptions)
    items.add(SimpleItem("a"), options=lambda e: setattr(e, "test_text", "t"))
    assert [entry.test_text for entry in items.options] == ["t"]
