import logging
from typing import Any, List, Optional

from .core import DEFAULT_DESCRIPTION, remote_from_upstream, validate_product_fields
from .database import LocalStore
from .errors import NotFound, UpstreamUnavailable
from .models import LocalProduct, Product, RemoteProduct
from .upstream import FakeStoreClient

# This file contains the catalog logic behind the product endpoints.

logger = logging.getLogger(__name__)


class Catalog:
    """Merges the read-only upstream catalog with the local product store.

    Remote products are only ever read. Local products are created,
    updated and deleted here and nowhere else.
    """

    def __init__(self, upstream: FakeStoreClient, store: LocalStore):
        self.upstream = upstream
        self.store = store

    async def _remote_products(self) -> List[RemoteProduct]:
        items = await self.upstream.fetch_products()
        return [remote_from_upstream(item) for item in items]

    async def list_products(self) -> List[Product]:
        remote = await self._remote_products()
        local = self.store.all()

        seen = set()
        for p in remote:
            if p.id in seen:
                raise UpstreamUnavailable(f"upstream catalog repeats id {p.id}")
            seen.add(p.id)
        clashes = seen.intersection(p.id for p in local)
        if clashes:
            logger.error("upstream ids %s collide with local products", sorted(clashes))
            raise UpstreamUnavailable(f"upstream ids collide with local products: {sorted(clashes)}")

        logger.debug("listing %d remote + %d local products", len(remote), len(local))
        return [*remote, *local]

    async def create_local_product(self, name: Any, price: Any, image_url: Any,
                                   category: Optional[str] = None,
                                   description: Optional[str] = None) -> LocalProduct:
        name, amount, image_url = validate_product_fields(name, price, image_url)
        return await self.store.create(name, amount, image_url, category or "", description or None)

    async def update_local_product(self, product_id: int, name: Any, price: Any, image_url: Any,
                                   category: Optional[str] = None,
                                   description: Optional[str] = None) -> LocalProduct:
        if self.store.get(product_id) is None:
            raise NotFound(f"Product {product_id} not found or cannot update remote product")
        name, amount, image_url = validate_product_fields(name, price, image_url)
        return await self.store.update(product_id, name, amount, image_url, category or "", description or None)

    async def delete_local_product(self, product_id: int) -> LocalProduct:
        if self.store.get(product_id) is None:
            raise NotFound(f"Product {product_id} not found or cannot delete remote product")
        return await self.store.remove(product_id)

    async def get_product(self, product_id: int) -> Product:
        local = self.store.get(product_id)
        if local is not None:
            return local
        for p in await self._remote_products():
            if p.id == product_id:
                return p
        raise NotFound(f"Product {product_id} not found")

    async def get_product_detail(self, product_id: int) -> Product:
        product = await self.get_product(product_id)
        if isinstance(product, LocalProduct):
            return product.model_copy(update={"description": product.description or DEFAULT_DESCRIPTION})

        data = await self.upstream.fetch_product(product_id)
        description = data.get("description") or DEFAULT_DESCRIPTION
        return product.model_copy(update={"description": description})
