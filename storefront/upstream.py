"""
Client for the remote demo catalog (Fake Store API).

The upstream is read-only, unauthenticated and unversioned. Calls are made
once with no retry; any transport error, non-success status or
undecodable body surfaces as UpstreamUnavailable.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


class FakeStoreClient:
    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    async def _get_json(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                r = await client.get(url)
                r.raise_for_status()
                return r.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("upstream request %s failed: %s", url, e)
            raise UpstreamUnavailable(f"Failed to fetch {path} from upstream catalog") from e

    async def fetch_products(self) -> List[Dict[str, Any]]:
        data = await self._get_json("/products")
        if not isinstance(data, list):
            raise UpstreamUnavailable("upstream catalog did not return a list")
        return data

    async def fetch_product(self, product_id: int) -> Dict[str, Any]:
        data = await self._get_json(f"/products/{product_id}")
        if not isinstance(data, dict):
            raise UpstreamUnavailable(f"upstream returned no product {product_id}")
        return data
