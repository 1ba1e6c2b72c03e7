"""Catalog browsing and inventory edits over HTTP."""

import pytest


def _create(client, headers, **overrides):
    payload = {
        "name": "Gorilla Glue",
        "category": "flower",
        "strain_type": "hybrid",
        "thc_percent": 22.5,
        "stock_quantity": "150.5",
        "price_cents": 1100,
    }
    payload.update(overrides)
    return client.post("/api/products", json=payload, headers=headers)


def test_create_product(client, inventory_headers):
    resp = _create(client, inventory_headers)
    assert resp.status_code == 201
    product = resp.json["product"]
    assert product["category"] == "FLOWER"
    assert product["unit_kind"] == "MASS"
    assert product["strain_type"] == "HYBRID"
    assert product["stock_quantity"] == 150.5


@pytest.mark.parametrize("overrides", [
    {"category": "WEAPON"},
    {"price_cents": -1},
    {"price_cents": 10.5},
    {"stock_quantity": "-1"},
    {"thc_percent": 140},
    {"name": None},
    {"id": 7},
])
def test_create_rejects_bad_payload(client, inventory_headers, overrides):
    assert _create(client, inventory_headers, **overrides).status_code == 400


def test_edit_overwrites_stock_and_price(client, inventory_headers, make_product):
    product = make_product(stock="10", price_cents=500)
    resp = client.patch(
        f"/api/products/{product.id}",
        json={"stock_quantity": 40, "price_cents": 650},
        headers=inventory_headers,
    )
    assert resp.status_code == 200
    assert resp.json["product"]["stock_quantity"] == 40.0
    assert resp.json["product"]["price_cents"] == 650


def test_edit_unknown_product(client, inventory_headers):
    assert client.patch("/api/products/999", json={"price_cents": 1}, headers=inventory_headers).status_code == 404


def test_list_and_filter(client, sales_headers, make_product):
    make_product(name="Lemon Haze", category="FLOWER")
    make_product(name="Lemon Soda", category="DRINK")
    make_product(name="Grinder", category="ACCESSORY")

    items = client.get("/api/products?q=lemon", headers=sales_headers).json["items"]
    assert [p["name"] for p in items] == ["Lemon Haze", "Lemon Soda"]

    items = client.get("/api/products?category=drink", headers=sales_headers).json["items"]
    assert [p["name"] for p in items] == ["Lemon Soda"]

    assert client.get("/api/products?category=nope", headers=sales_headers).status_code == 400
