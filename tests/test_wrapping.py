"""Tests for wrap_single and wrap_many."""

from dynamic_vml import DynamicListItem, wrap_many, wrap_single
from viewmodels import ItemOptions, SimpleItem


class Row:
    def __init__(self, value):
        self.value = value


def test_wrap_single_creates_one_entry_list():
    """Test a single view model becomes a one-entry list with the given container id."""
    result = wrap_single(SimpleItem("a"), "C")

    assert result.container_id == "C"
    assert len(result) == 1
    entry = result.get(result.index)
    assert type(entry) is DynamicListItem
    assert entry.view_model == SimpleItem("a")


def test_wrap_single_uses_options_instance():
    """Test an options instance is used as the entry itself."""
    options = ItemOptions(test_text="hello", index="K")
    result = wrap_single(SimpleItem("a"), options=options)

    assert result["K"] is options
    assert options.view_model == SimpleItem("a")


def test_wrap_single_applies_options_mutator():
    """Test a callable configures a new entry of entry_type."""
    result = wrap_single(
        SimpleItem("a"),
        options=lambda entry: setattr(entry, "test_text", "set"),
        entry_type=ItemOptions,
    )
    assert result.values()[0].test_text == "set"


def test_wrap_many_with_selectors():
    """Test domain models are converted through the view model and options selectors."""
    rows = [Row("x"), Row("y")]
    result = wrap_many(
        rows,
        view_model_selector=lambda row: SimpleItem(row.value),
        options_selector=lambda row: ItemOptions(test_text=row.value * 2),
        item_type=SimpleItem,
    )

    assert result.item_type is SimpleItem
    assert [vm.item_property for vm in result.view_models] == ["x", "y"]
    assert [entry.test_text for entry in result] == ["xx", "yy"]
