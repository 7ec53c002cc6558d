"""Tests for the new-item handlers through the sample application."""

import html
import logging
import re

from dynamic_vml import AddNewDynamicItem, ListRenderMode, Settings, create_app

SIMPLE_QUERY = (
    "?ContainerId=I&ListTemplate=EditorTemplates%2fDynamicList"
    "&ItemContainerTemplate=DynamicItemContainer&ItemTemplate=SimpleItem&Prefix=items&Mode=0"
)
ITEM_DIV = re.compile(r'<div id="([^"]+)">')


def post_payload(item_template="SimpleItemWithViewData", additional_view_data=None):
    return AddNewDynamicItem.create(
        container_id="I",
        list_template="EditorTemplates/DynamicList",
        item_container_template="DynamicItemContainer",
        item_template=item_template,
        prefix="items",
        mode=ListRenderMode.VIEW_MODEL_ONLY,
        additional_view_data=additional_view_data,
    ).to_json()


def test_page_renders(client):
    response = client.get("/EditSimple")

    assert response.status_code == 200
    assert 'name="items[R0].ViewModel.item_property" value="Value 0"' in response.text
    assert '<script src="/dvml/dvml.js"></script>' in response.text


def test_client_script_is_served(client):
    response = client.get("/dvml/dvml.js")

    assert response.status_code == 200
    assert "function add(containerId, instruction)" in response.text
    assert "function remove(itemId)" in response.text


def test_get_new_item(client):
    """Test a GET add request returns one item container with the list's field prefix."""
    response = client.get("/AddSimpleItem/" + SIMPLE_QUERY)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    (index,) = ITEM_DIV.findall(response.text)
    assert f'name="items.Index" value="{index}"' in response.text
    assert f'name="items[{index}].ViewModel.item_property" value="new"' in response.text


def test_add_link_of_rendered_page_round_trips(client):
    """Test the instruction embedded in a page is accepted by the GET handler."""
    page = client.get("/EditSimple").text
    instruction = html.unescape(re.search(r'data-container-id="I" data-instruction="([^"]*)"', page).group(1))

    response = client.get("/" + instruction)
    assert response.status_code == 200
    assert 'value="new"' in response.text


def test_get_new_item_with_options(client):
    """Test an options instance becomes the entry rendered in VIEW_MODEL_WITH_OPTIONS mode."""
    query = SIMPLE_QUERY.replace("ItemTemplate=SimpleItem", "ItemTemplate=ItemWithOptions").replace(
        "Mode=0", "Mode=1"
    )
    response = client.get("/AddItemWithOptions/" + query)

    assert response.status_code == 200
    assert '<span class="options">hello</span>' in response.text
    (index,) = ITEM_DIV.findall(response.text)
    assert f'name="items[{index}].ViewModel.item_property" value="optioned"' in response.text


def test_get_new_item_rejects_view_data(client):
    """Test additional view data sent over GET is refused."""
    response = client.get("/AddSimpleItem/" + SIMPLE_QUERY + "&AdditionalViewData=e30%3D")

    assert response.status_code == 400
    assert response.json()["error"] == "MalformedNewItemRequestError"


def test_get_new_item_with_missing_fields(client):
    response = client.get("/AddSimpleItem/?ContainerId=I")

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "MalformedNewItemRequestError"
    assert "ItemTemplate" in body["detail"]


def test_post_new_item(client):
    """Test a POST add request answers {success, html} and forwards the view data."""
    response = client.post(
        "/AddSimpleItemByPost/",
        content=post_payload(additional_view_data={"color": "blue"}),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert '<span class="color">blue</span>' in body["html"]
    (index,) = ITEM_DIV.findall(body["html"])
    assert f'name="items[{index}].ViewModel.item_property" value="new"' in body["html"]


def test_post_new_item_render_failure(client):
    """Test a failing item template is reported without an error status."""
    response = client.post(
        "/AddSimpleItemByPost/",
        content=post_payload(item_template="DoesNotExist"),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert "options object" in body["html"]


def test_get_handler_called_by_post(client):
    """Test partial_view refuses POST requests."""
    response = client.post(
        "/AddSimpleItemWrongMethod/",
        content=post_payload(),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 405
    assert response.json()["error"] == "WrongHttpMethodForNewItemError"
    assert "partial_view_async" in response.json()["detail"]


def test_post_handler_called_by_get(client):
    response = client.get("/AddSimpleItemAsyncByGet/" + SIMPLE_QUERY)

    assert response.status_code == 405
    assert response.json()["error"] == "WrongHttpMethodForNewItemError"


def test_create_app_leaves_root_logger_alone():
    """Test create_app only sets the level of the package loggers."""
    root = logging.getLogger()
    package_logger = logging.getLogger("dynamic_vml")
    handlers, root_level, package_level = list(root.handlers), root.level, package_logger.level
    try:
        create_app(settings=Settings(_env_file=None, log_level="DEBUG"))

        assert root.handlers == handlers
        assert root.level == root_level
        assert package_logger.level == logging.DEBUG
    finally:
        package_logger.setLevel(package_level)
