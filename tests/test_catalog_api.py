# tests/test_catalog_api.py
import asyncio

import pytest
from fastapi.testclient import TestClient

from storefront.catalog import Catalog
from storefront.database import LocalStore
from storefront.errors import InvalidInput
from storefront.main import app, get_catalog

MUG = {"name": "Mug", "price": 9.99, "imageUrl": "http://x/y.png"}


def test_list_merges_remote_products(client):
    r = client.get("/api/products")
    assert r.status_code == 200
    body = r.json()
    assert [p["id"] for p in body] == [1, 2, 5]
    assert body[0] == {
        "id": 1,
        "name": "Fjallraven Backpack",
        "price": 109.95,
        "imageUrl": "https://fakestoreapi.com/img/1.jpg",
        "category": "men's clothing",
        "isLocal": False,
    }


def test_create_then_list_shows_local_product(client):
    r = client.post("/api/products", json={**MUG, "category": "kitchen"})
    assert r.status_code == 201
    created = r.json()
    assert created["isLocal"] is True
    assert created["category"] == "kitchen"
    assert created["id"] not in (1, 2, 5)

    listed = client.get("/api/products").json()
    assert listed[-1] == created


def test_category_defaults_to_empty(client):
    created = client.post("/api/products", json=MUG).json()
    assert created["category"] == ""


def test_ids_stay_unique_and_local_come_last(client):
    ids = [client.post("/api/products", json={**MUG, "name": f"Mug {i}"}).json()["id"] for i in range(3)]
    assert ids == [10000, 10001, 10002]

    listed = client.get("/api/products").json()
    all_ids = [p["id"] for p in listed]
    assert len(all_ids) == len(set(all_ids))
    assert [p["isLocal"] for p in listed] == [False, False, False, True, True, True]
    assert [p["name"] for p in listed[3:]] == ["Mug 0", "Mug 1", "Mug 2"]


@pytest.mark.parametrize("field", ["name", "price", "imageUrl"])
@pytest.mark.parametrize("value", [None, ""])
def test_create_rejects_missing_required_field(client, catalog, field, value):
    payload = dict(MUG)
    if value is None:
        del payload[field]
    else:
        payload[field] = value

    r = client.post("/api/products", json=payload)
    assert r.status_code == 400
    assert r.json()["detail"]["fields"] == [field]
    assert len(catalog.store) == 0


def test_create_reports_every_missing_field(client):
    r = client.post("/api/products", json={"category": "kitchen"})
    assert r.status_code == 400
    assert r.json()["detail"]["fields"] == ["name", "price", "imageUrl"]


def test_create_rejects_negative_price(client, catalog):
    r = client.post("/api/products", json={**MUG, "price": -1})
    assert r.status_code == 400
    assert r.json()["detail"]["fields"] == ["price"]
    assert len(catalog.store) == 0


def test_zero_price_is_accepted(client):
    r = client.post("/api/products", json={**MUG, "price": 0})
    assert r.status_code == 201
    assert r.json()["price"] == 0


def test_delete_local_product_once(client):
    created = client.post("/api/products", json=MUG).json()

    r = client.delete("/api/products", params={"id": created["id"]})
    assert r.status_code == 200
    assert r.json() == created
    assert created["id"] not in [p["id"] for p in client.get("/api/products").json()]

    again = client.delete("/api/products", params={"id": created["id"]})
    assert again.status_code == 404


def test_delete_remote_product_is_not_found(client, catalog):
    client.post("/api/products", json=MUG)

    r = client.delete("/api/products", params={"id": 1})
    assert r.status_code == 404
    assert len(catalog.store) == 1
    assert [p["id"] for p in client.get("/api/products").json()] == [1, 2, 5, 10000]


def test_delete_requires_id(client):
    r = client.delete("/api/products")
    assert r.status_code == 400


def test_upstream_failure_fails_the_whole_listing(client, upstream):
    client.post("/api/products", json=MUG)
    upstream.fail_list = True

    r = client.get("/api/products")
    assert r.status_code == 502
    assert "error" in r.json()["detail"]


def test_malformed_upstream_item_is_an_upstream_failure(client, upstream):
    upstream.items.append({"id": 9, "price": 1.0})
    assert client.get("/api/products").status_code == 502


def test_remote_id_colliding_with_local_id_is_rejected(upstream):
    catalog = Catalog(upstream=upstream, store=LocalStore(id_offset=5))
    app.dependency_overrides[get_catalog] = lambda: catalog
    try:
        with TestClient(app) as c:
            assert c.post("/api/products", json=MUG).json()["id"] == 5
            assert c.get("/api/products").status_code == 502
    finally:
        app.dependency_overrides.clear()


def test_update_local_product_keeps_id(client):
    created = client.post("/api/products", json=MUG).json()

    r = client.put("/api/products", params={"id": created["id"]},
                   json={"name": "Big Mug", "price": 12.5, "imageUrl": "http://x/z.png", "category": "kitchen"})
    assert r.status_code == 200
    assert r.json() == {
        "id": created["id"],
        "name": "Big Mug",
        "price": 12.5,
        "imageUrl": "http://x/z.png",
        "category": "kitchen",
        "isLocal": True,
    }
    assert client.get("/api/products").json()[-1]["name"] == "Big Mug"


def test_update_remote_product_is_not_found(client):
    r = client.put("/api/products", params={"id": 1}, json=MUG)
    assert r.status_code == 404


def test_update_validates_fields(client):
    created = client.post("/api/products", json=MUG).json()
    r = client.put("/api/products", params={"id": created["id"]}, json={**MUG, "name": "  "})
    assert r.status_code == 400
    assert client.get("/api/products").json()[-1]["name"] == "Mug"


def test_detail_of_remote_product_fetches_description(client, upstream):
    r = client.get("/api/products/detail", params={"id": 5})
    assert r.status_code == 200
    assert r.json()["description"] == "From our Legends Collection."
    assert r.json()["isLocal"] is False
    assert upstream.detail_calls == 1


def test_detail_of_remote_product_when_upstream_fails(client, upstream):
    upstream.fail_detail = True
    assert client.get("/api/products/detail", params={"id": 5}).status_code == 502


def test_detail_of_local_product(client):
    plain = client.post("/api/products", json=MUG).json()
    described = client.post("/api/products", json={**MUG, "description": "Holds tea."}).json()

    assert client.get("/api/products/detail", params={"id": plain["id"]}).json()["description"] == \
        "No description available."
    assert client.get("/api/products/detail", params={"id": described["id"]}).json()["description"] == "Holds tea."


def test_detail_of_unknown_product(client):
    assert client.get("/api/products/detail", params={"id": 777}).status_code == 404


def test_example_scenario(client, upstream):
    upstream.items = upstream.items[:1]
    original = client.get("/api/products").json()
    assert [p["isLocal"] for p in original] == [False]

    created = client.post("/api/products", json=MUG)
    assert created.status_code == 201
    assert created.json()["id"] == 10000
    assert created.json()["isLocal"] is True

    assert len(client.get("/api/products").json()) == 2

    deleted = client.delete("/api/products", params={"id": 10000})
    assert deleted.json() == created.json()
    assert client.get("/api/products").json() == original


@pytest.mark.parametrize("name,image_url,fields", [
    (123, "http://x/y.png", ["name"]),
    ("Mug", ["http://x/y.png"], ["imageUrl"]),
])
def test_direct_create_rejects_non_text_fields(catalog, name, image_url, fields):
    with pytest.raises(InvalidInput) as exc:
        asyncio.run(catalog.create_local_product(name, 9.99, image_url))
    assert exc.value.fields == fields
    assert len(catalog.store) == 0
