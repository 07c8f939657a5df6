# sdk/storeclient.py
import logging
from typing import Any, Dict, List, Optional

import requests

from storefront.errors import InvalidInput, NotFound, StoreError, UpstreamUnavailable

logger = logging.getLogger(__name__)


class StoreClient:
    """Thin HTTP wrapper around the catalog API.

    Non-success responses are raised as the storefront error types so
    callers never have to look at status codes.
    """

    def __init__(self, base_url: str = "http://localhost:8085", timeout: float = 10,
                 session: Optional[Any] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    @property
    def products_url(self) -> str:
        return f"{self.base_url}/api/products"

    def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise UpstreamUnavailable(f"Could not reach the store at {self.base_url}") from e

        if r.status_code < 400:
            try:
                return r.json()
            except ValueError as e:
                logger.warning("%s %s returned a non-JSON body", method, url)
                raise UpstreamUnavailable(f"Unexpected response from the store at {self.base_url}") from e

        error, fields = _error_body(r)
        if r.status_code == 400 or r.status_code == 422:
            raise InvalidInput(error or "Invalid input", fields=fields)
        if r.status_code == 404:
            raise NotFound(error or "Not found")
        if r.status_code >= 500:
            raise UpstreamUnavailable(error or f"HTTP {r.status_code}")
        raise StoreError(error or f"HTTP {r.status_code}")

    # Products
    def list_products(self) -> List[Dict[str, Any]]:
        return self._request("GET", self.products_url)

    def create_product(self, name: str, price: Any, image_url: str, category: str = "",
                       description: Optional[str] = None) -> Dict[str, Any]:
        payload = {"name": name, "price": price, "imageUrl": image_url, "category": category}
        if description:
            payload["description"] = description
        return self._request("POST", self.products_url, json=payload)

    def update_product(self, product_id: int, name: str, price: Any, image_url: str, category: str = "",
                       description: Optional[str] = None) -> Dict[str, Any]:
        payload = {"name": name, "price": price, "imageUrl": image_url, "category": category}
        if description:
            payload["description"] = description
        return self._request("PUT", self.products_url, params={"id": product_id}, json=payload)

    def delete_product(self, product_id: int) -> Dict[str, Any]:
        return self._request("DELETE", self.products_url, params={"id": product_id})

    def get_product_detail(self, product_id: int) -> Dict[str, Any]:
        return self._request("GET", f"{self.products_url}/detail", params={"id": product_id})


def _error_body(r: Any):
    try:
        body = r.json()
    except ValueError:
        return r.text or None, []
    detail = body.get("detail", body) if isinstance(body, dict) else body
    if isinstance(detail, dict):
        return detail.get("error"), list(detail.get("fields") or [])
    if isinstance(detail, str):
        return detail, []
    # FastAPI request-validation errors: list of {loc, msg, ...}
    if isinstance(detail, list):
        fields = [str(d.get("loc", ["", "?"])[-1]) for d in detail if isinstance(d, dict)]
        return "Invalid input", fields
    return None, []
