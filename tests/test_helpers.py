"""Tests rendering pages through the template helpers."""

import html
import json
import re

import pytest

from dynamic_vml import (
    AmbiguousRenderModeError,
    MissingConfigurationError,
    NotADynamicListError,
    RenderContext,
    TemplateRenderError,
    ViewScope,
)
from dynamic_vml.models.schemas import AddNewDynamicItem
from dynamic_vml.views.helpers import DynamicListHelper, view_data_dict
from viewmodels import (
    AuthorViewModel,
    ItemOptions,
    NestedRecursive,
    NoneList,
    NotAList,
    OuterList,
    SimpleItem,
    SimpleList,
    TwoLists,
)

ADD_LINK = re.compile(r'data-container-id="([^"]*)" data-instruction="([^"]*)"')


def add_calls(output):
    """(container id, instruction) of every "add" link, as the client script receives them."""
    return [(html.unescape(c), html.unescape(i)) for c, i in ADD_LINK.findall(output)]


def test_editor_renders_every_item(render_page):
    """Test the editor renders each item under its key with the right field names."""
    output = render_page("EditSimple", SimpleList())

    assert '<div id="I">' in output
    assert 'name="items.ContainerId" value="I"' in output
    for i in range(3):
        assert f'<div id="R{i}">' in output
        assert f'name="items.Index" value="R{i}"' in output
        assert f'name="items[R{i}].ViewModel.item_property" value="Value {i}"' in output
        assert f'data-item-id="R{i}" onclick="dvml.remove(this.dataset.itemId);"' in output
    assert "Add new SimpleItem</a>" in output


def test_editor_add_link_instruction(render_page):
    """Test the add link calls the client script with the GET instruction."""
    output = render_page("EditSimple", SimpleList())

    assert add_calls(output) == [
        (
            "I",
            "AddSimpleItem/?ContainerId=I&ListTemplate=EditorTemplates%2fDynamicList"
            "&ItemContainerTemplate=DynamicItemContainer&ItemTemplate=SimpleItem&Prefix=items&Mode=0",
        )
    ]


def test_editor_keeps_item_order(render_page):
    model = SimpleList(0)
    for key in ("z", "a", "m"):
        model.items.add(SimpleItem(key), index=key)
    output = render_page("EditSimple", model)

    positions = [output.index(f'<div id="{key}">') for key in ("z", "a", "m")]
    assert positions == sorted(positions)


def test_display_renders_without_inputs(render_page):
    """Test the display templates render the items read-only."""
    output = render_page("DisplaySimple", SimpleList())

    assert '<span class="item">Value 0</span>' in output
    assert '<span class="item">Value 2</span>' in output
    assert "<input" not in output
    assert "dynamic-list-addnewitem" not in output


def test_editor_and_display_of_the_same_list(render_page):
    """Test one page can render the same list for editing and for display."""
    output = render_page("EditAndDisplaySimple", SimpleList(1))

    assert 'name="items[R0].ViewModel.item_property"' in output
    assert '<span class="item">Value 0</span>' in output


def test_render_mode_with_options(render_page):
    """Test the item template receives the whole entry in VIEW_MODEL_WITH_OPTIONS mode."""
    model = SimpleList(0)
    model.items.add(ItemOptions(view_model=SimpleItem("b"), index="R0", test_text="opt-R0"))
    output = render_page("EditWithOptions", model)

    assert '<span class="options">opt-R0</span>' in output
    assert 'name="items[R0].ViewModel.item_property" value="b"' in output


def test_additional_view_data_reaches_only_its_list(render_page):
    """Test view data given to one list is not visible to the next list."""
    output = render_page("EditWithViewData", TwoLists())

    first, second = output.split('<div id="S">')
    assert '<span class="color">red</span>' in first
    assert '<span class="color">none</span>' in second
    assert "red" not in second


def test_additional_view_data_travels_with_post_instruction(render_page):
    """Test a POST list embeds the view data in the JSON payload of the add link."""
    output = render_page("EditWithViewData", TwoLists())

    (container_id, instruction), _ = add_calls(output)
    method, url, body = instruction.split("|", 2)
    payload = AddNewDynamicItem.model_validate(json.loads(body))

    assert (container_id, method, url) == ("F", "POST", "AddSimpleItem")
    assert payload.item_template == "SimpleItemWithViewData"
    assert payload.get_additional_view_data() == {"color": "red"}


def test_registered_attribute_wins(render_page):
    """Test the @dynamic_list configuration overrides the template arguments."""
    output = render_page("EditAuthor", AuthorViewModel("Ann", ("One", "Two")))

    assert 'class="book" name="books[B0].ViewModel.title" value="One"' in output
    assert 'class="book" name="books[B1].ViewModel.title" value="Two"' in output
    (container_id, instruction), = add_calls(output)
    assert container_id == "B"
    assert instruction.startswith("POST|AddBook|")
    assert "Add new BookViewModel" in output


def test_nested_lists_keep_their_own_parameters(render_page):
    """Test three nested levels resolve independently with composed prefixes."""
    output = render_page("EditNested", NestedRecursive(0, 2))

    assert 'name="children.Index" value="N1"' in output
    assert 'name="children[N1].ViewModel.level" value="1"' in output
    assert 'name="children[N1].ViewModel.children.Index" value="N2"' in output
    assert 'name="children[N1].ViewModel.children[N2].ViewModel.level" value="2"' in output
    assert 'name="children[N1].ViewModel.children[N2].ViewModel.children.ContainerId" value="L2"' in output

    instructions = dict(add_calls(output))
    assert set(instructions) == {"L0", "L1", "L2"}
    assert "&Prefix=children&" in instructions["L0"]
    assert "&Prefix=children[N1].ViewModel.children&" in instructions["L1"]
    assert "&Prefix=children[N1].ViewModel.children[N2].ViewModel.children&" in instructions["L2"]
    assert all("ItemTemplate=NestedRecursive" in value for value in instructions.values())


def test_none_property_fails(render_page):
    with pytest.raises(ValueError):
        render_page("EditSimple", _titled(NoneList()))


def test_non_list_property_fails(render_page):
    with pytest.raises(NotADynamicListError):
        render_page("EditSimple", _titled(NotAList()))


def _titled(model):
    model.title = "Broken"
    return model


def test_missing_item_template_is_wrapped(render_page):
    """Test template engine failures surface as TemplateRenderError."""
    with pytest.raises(TemplateRenderError) as e:
        render_page("EditMissingItemTemplate", SimpleList(1))

    assert e.value.container_id == "I"
    assert isinstance(e.value.__cause__, Exception)
    assert "DoesNotExist" in e.value.message


def test_item_helpers_outside_item_container_fail(renderer, settings):
    """Test item-level helpers refuse to run without staged item parameters."""
    helper = DynamicListHelper(ViewScope(RenderContext(settings=settings), SimpleList()), renderer)

    assert helper.item_parameters() is None
    with pytest.raises(MissingConfigurationError):
        helper.index_field_name()
    with pytest.raises(NotADynamicListError):
        helper.render_item_container_editor("R0")


def test_view_data_dict_accepts_objects():
    class Holder:
        def __init__(self):
            self.color = "red"

    assert view_data_dict(None) is None
    assert view_data_dict({"a": 1}) == {"a": 1}
    assert view_data_dict(SimpleItem("x")) == {"item_property": "x"}
    assert view_data_dict(Holder()) == {"color": "red"}


def test_nested_list_reusing_a_key_keeps_parent_item(render_page):
    """Test an inner item keyed like its parent item does not replace the parent's parameters."""
    output = render_page("EditOuter", OuterList())

    assert 'name="outer.Index" value="1"' in output
    assert output.count('name="outer[1].ViewModel.inner.Index" value="1"') == 1
    assert 'name="outer[1].ViewModel.inner[1].ViewModel.item_property" value="inner"' in output
    assert '<span class="owner">OUT</span>' in output
    assert output.index('name="outer[1].ViewModel.inner.Index"') < output.index('name="outer.Index"')


@pytest.mark.parametrize("page", ["EditWithInvalidMode", "DisplayWithInvalidMode"])
def test_invalid_mode_argument_fails(render_page, page):
    """Test an unknown render mode given to a template helper is reported as ambiguous."""
    with pytest.raises(AmbiguousRenderModeError) as e:
        render_page(page, SimpleList(1))
    assert e.value.container_id == "I"


def test_add_link_survives_quotes(render_page):
    """Test an instruction containing an apostrophe reaches the client script intact."""
    output = render_page("EditWithQuotedAction", SimpleList(1))

    assert 'data-instruction="Add&#39;Simple/?ContainerId=I&amp;' in output
    ((container_id, instruction),) = add_calls(output)
    assert container_id == "I"
    assert instruction.startswith("Add'Simple/?ContainerId=I&ListTemplate=")
