import asyncio
import logging
from typing import Dict, List, Optional

from .errors import NotFound
from .models import LocalProduct, Origin, ProductKey

# In-memory store for locally created products. Lives as long as the
# process does; nothing here is written to disk.

logger = logging.getLogger(__name__)


class LocalStore:
    def __init__(self, id_offset: int = 10000):
        self.id_offset = id_offset
        self._products: Dict[int, LocalProduct] = {}
        self._next_seq = 0
        self._lock = asyncio.Lock()

    def key_for(self, product_id: int) -> Optional[ProductKey]:
        """Resolve a wire id to a local key, or None if no local product has it."""
        seq = product_id - self.id_offset
        if seq in self._products:
            return ProductKey(Origin.LOCAL, seq)
        return None

    def get(self, product_id: int) -> Optional[LocalProduct]:
        key = self.key_for(product_id)
        return self._products[key.number] if key else None

    def all(self) -> List[LocalProduct]:
        return list(self._products.values())

    def ids(self) -> List[int]:
        return [p.id for p in self._products.values()]

    def __len__(self) -> int:
        return len(self._products)

    async def create(self, name: str, price: float, image_url: str,
                     category: str = "", description: Optional[str] = None) -> LocalProduct:
        async with self._lock:
            seq = self._next_seq
            product = LocalProduct(
                id=self.id_offset + seq,
                seq=seq,
                name=name,
                price=price,
                image_url=image_url,
                category=category,
                description=description,
            )
            self._products[seq] = product
            self._next_seq += 1
        logger.info("created local product id=%s name=%r", product.id, product.name)
        return product

    async def update(self, product_id: int, name: str, price: float, image_url: str,
                     category: str = "", description: Optional[str] = None) -> LocalProduct:
        async with self._lock:
            key = self.key_for(product_id)
            if key is None:
                raise NotFound(f"no local product with id {product_id}")
            current = self._products[key.number]
            updated = current.model_copy(update={
                "name": name,
                "price": price,
                "image_url": image_url,
                "category": category,
                "description": description if description is not None else current.description,
            })
            self._products[key.number] = updated
        logger.info("updated local product id=%s", product_id)
        return updated

    async def remove(self, product_id: int) -> LocalProduct:
        async with self._lock:
            key = self.key_for(product_id)
            if key is None:
                raise NotFound(f"no local product with id {product_id}")
            product = self._products.pop(key.number)
        logger.info("deleted local product id=%s", product_id)
        return product

    async def clear(self) -> None:
        async with self._lock:
            self._products.clear()
            self._next_seq = 0
