"""Tests for the shop catalog page and its JSON endpoints."""

from __future__ import annotations

from storefront.logging_service import log_manager
from storefront.shop.catalog import parse_catalog


def _positions(html: bytes, *names: str) -> list[int]:
    return [html.index(f"<td>{name}</td>".encode()) for name in names]


def test_root_redirects_to_shop(client):
    response = client.get("/")

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/shop/")


def test_catalog_page_lists_every_product_by_default(client):
    response = client.get("/shop/")

    assert response.status_code == 200
    positions = _positions(response.data, "Apple", "Banana", "Water")
    assert positions == sorted(positions)
    assert b'<option value="fruits">fruits</option>' in response.data
    assert b'<option value="all" selected>All categories</option>' in response.data


def test_catalog_page_filters_and_sorts(client):
    response = client.get("/shop/?category=fruits&sort=priceAscending")

    assert response.status_code == 200
    banana, apple = _positions(response.data, "Banana", "Apple")
    assert banana < apple
    assert b"<td>Water</td>" not in response.data
    assert b'<option value="priceAscending" selected>' in response.data


def test_catalog_page_shows_empty_state_for_unknown_category(client):
    response = client.get("/shop/?category=snacks")

    assert response.status_code == 200
    assert b"No products in this category." in response.data


def test_products_api_returns_sorted_listing(client):
    response = client.get("/shop/api/products?sort=nameDescending")

    assert response.status_code == 200
    data = response.get_json()
    assert [item["name"] for item in data["items"]] == ["Water", "Banana", "Apple"]
    assert data["count"] == 3
    assert data["category"] == "all"
    assert data["sort_recognized"] is True


def test_products_api_accepts_short_sort_tokens(client):
    data = client.get("/shop/api/products?category=fruits&sort=priceDesc").get_json()

    assert [item["name"] for item in data["items"]] == ["Apple", "Banana"]
    assert data["sort"] == "priceDescending"


def test_products_api_keeps_order_and_warns_on_unknown_sort(client, app):
    data = client.get("/shop/api/products?sort=popularity").get_json()

    assert [item["name"] for item in data["items"]] == ["Apple", "Banana", "Water"]
    assert data["sort_recognized"] is False

    with app.app_context():
        warnings = log_manager.fetch_logs(level="warn", component="Shop")
    assert [entry["title"] for entry in warnings] == ["Unknown sort order ignored"]


def test_products_api_returns_empty_items_for_unknown_category(client, app):
    response = client.get("/shop/api/products?category=snacks&sort=priceAscending")

    assert response.status_code == 200
    assert response.get_json()["items"] == []

    with app.app_context():
        logs = log_manager.fetch_logs(search="No matching products")
    assert len(logs) == 1
    assert logs[0]["result"] == "empty"


def test_categories_api_lists_selector_options(client):
    data = client.get("/shop/api/categories").get_json()

    assert [option["value"] for option in data["categories"]] == ["all", "fruits", "drinks"]
    assert data["sorts"][0] == {"value": "", "label": "No sorting"}


def test_catalog_page_survives_out_of_range_price(client, app):
    app.extensions["catalog"] = parse_catalog(
        {"misc": [{"name": "Comet", "price": "9e99999999999999999999"}, {"name": "Pebble", "price": "2"}]}
    )

    page = client.get("/shop/?sort=priceDescending")
    data = client.get("/shop/api/products?sort=priceAscending").get_json()

    assert page.status_code == 200
    comet, pebble = _positions(page.data, "Comet", "Pebble")
    assert comet < pebble
    assert [item["name"] for item in data["items"]] == ["Pebble", "Comet"]


def test_catalog_page_selects_canonical_option_for_short_sort_token(client):
    response = client.get("/shop/?sort=priceAsc")

    assert b'<option value="priceAscending" selected>' in response.data
    assert b'<option value="" selected>' not in response.data


def test_catalog_page_keeps_unknown_category_selected(client):
    response = client.get("/shop/?category=snacks")

    assert b'<option value="snacks" selected>snacks (not in catalog)</option>' in response.data
    assert b'<option value="all" selected>' not in response.data


def test_refresh_logs_carry_selector_context(client, app):
    client.get("/shop/api/products?category=fruits&sort=alphaDesc")

    with app.app_context():
        entries = log_manager.fetch_logs(action="api-products")

    assert len(entries) == 1
    assert entries[0]["context"] == {
        "category": "fruits",
        "sort": "alphaDesc",
        "criterion": "nameDescending",
        "count": 2,
        "unpriced": 0,
    }
