# tests/conftest.py
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from sdk.storeclient import StoreClient
from storefront.catalog import Catalog
from storefront.database import LocalStore
from storefront.errors import UpstreamUnavailable
from storefront.main import app, get_catalog

REMOTE_ITEMS = [
    {"id": 1, "title": "Fjallraven Backpack", "price": 109.95,
     "image": "https://fakestoreapi.com/img/1.jpg", "category": "men's clothing",
     "description": "Your perfect pack for everyday use."},
    {"id": 2, "title": "Mens Casual Slim Fit T-Shirt", "price": 22.3,
     "image": "https://fakestoreapi.com/img/2.jpg", "category": "men's clothing",
     "description": "Slim-fitting style."},
    {"id": 5, "title": "Gold Dragon Bracelet", "price": 695,
     "image": "https://fakestoreapi.com/img/5.jpg", "category": "jewelery",
     "description": "From our Legends Collection."},
]


class FakeUpstream:
    """Stands in for the remote catalog; no network."""

    def __init__(self, items: Optional[List[Dict[str, Any]]] = None):
        self.items = list(items if items is not None else REMOTE_ITEMS)
        self.fail_list = False
        self.fail_detail = False
        self.list_calls = 0
        self.detail_calls = 0

    async def fetch_products(self) -> List[Dict[str, Any]]:
        self.list_calls += 1
        if self.fail_list:
            raise UpstreamUnavailable("Failed to fetch /products from upstream catalog")
        # the catalog only exposes listing fields
        return [{k: v for k, v in item.items() if k != "description"} for item in self.items]

    async def fetch_product(self, product_id: int) -> Dict[str, Any]:
        self.detail_calls += 1
        if self.fail_detail:
            raise UpstreamUnavailable(f"Failed to fetch /products/{product_id} from upstream catalog")
        for item in self.items:
            if item["id"] == product_id:
                return dict(item)
        raise UpstreamUnavailable(f"upstream returned no product {product_id}")


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def catalog(upstream):
    return Catalog(upstream=upstream, store=LocalStore(id_offset=10000))


@pytest.fixture
def client(catalog):
    app.dependency_overrides[get_catalog] = lambda: catalog
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def store_client(client):
    # the SDK speaking to the in-process app
    return StoreClient(base_url="http://testserver", session=client)
