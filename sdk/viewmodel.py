"""
Client-side state for the storefront.

The view-model holds the products returned by the catalog API and derives
everything the front end shows from them: the filtered list, the category
choices, the cart and its total, and the add/edit/delete form state.
It never renders anything itself; cli.py does that.

Products are the plain dicts returned by the API
({id, name, price, imageUrl, category, isLocal}).
"""

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from storefront.core import DEFAULT_DESCRIPTION
from storefront.errors import StoreError

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "Name, price, and image URL are required."

EMPTY_FORM = {"name": "", "price": "", "imageUrl": "", "category": ""}


class EditPolicy(str, Enum):
    # every edit only rewrites client-held state; lost on reload
    CLIENT_ONLY = "client-only"
    # local products are saved through the API, remote ones stay client-side
    PERSIST_LOCAL = "persist-local"
    # local products are saved through the API, remote ones cannot be edited
    LOCAL_ONLY = "local-only"


@dataclass
class Notice:
    kind: str  # "success" | "error"
    message: str
    expires_at: float


def filter_products(products: List[Dict[str, Any]], search: str = "", category: str = "") -> List[Dict[str, Any]]:
    """Products whose name contains ``search`` (any case) and whose category equals ``category``.

    An empty ``search`` or ``category`` matches everything. The input list is
    not modified.
    """
    term = (search or "").lower()
    return [
        p for p in products
        if (not term or term in (p.get("name") or "").lower())
        and (not category or p.get("category") == category)
    ]


def distinct_categories(products: List[Dict[str, Any]]) -> List[str]:
    seen: List[str] = []
    for p in products:
        cat = p.get("category")
        if cat and cat not in seen:
            seen.append(cat)
    return seen


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _parse_price(raw: Any) -> float:
    price = float(raw)
    if math.isnan(price) or math.isinf(price) or price < 0:
        raise ValueError(raw)
    return price


class StorefrontViewModel:
    def __init__(self, client: Any, edit_policy: EditPolicy, notice_seconds: float = 2.0,
                 clock: Callable[[], float] = time.monotonic):
        self.client = client
        self.edit_policy = EditPolicy(edit_policy)
        self.notice_seconds = notice_seconds
        self._clock = clock

        self.products: List[Dict[str, Any]] = []
        self.categories: List[str] = []
        self.loading = False
        self.error = ""

        self.search = ""
        self.category = ""

        self.cart: List[Dict[str, Any]] = []

        self.form: Dict[str, str] = dict(EMPTY_FORM)
        self.form_error = ""
        self.form_success = ""

        self.editing: Optional[Dict[str, Any]] = None
        self.edit_form: Dict[str, str] = dict(EMPTY_FORM)
        self.edit_error = ""

        self.pending_delete: Optional[int] = None
        self.error_message = ""

        self.detail: Optional[Dict[str, Any]] = None

        self._notice: Optional[Notice] = None

    # ---------------------------
    # Notices
    # ---------------------------
    def notify(self, kind: str, message: str) -> None:
        self._notice = Notice(kind, message, self._clock() + self.notice_seconds)

    @property
    def notice(self) -> Optional[Notice]:
        if self._notice is not None and self._clock() >= self._notice.expires_at:
            self._notice = None
        return self._notice

    # ---------------------------
    # Fetch cycle
    # ---------------------------
    def load(self) -> bool:
        self.loading = True
        self.error = ""
        try:
            data = self.client.list_products()
        except StoreError as e:
            logger.warning("loading products failed: %s", e)
            self.error = str(e) or "Failed to fetch products"
            return False
        finally:
            self.loading = False
        self.products = list(data)
        self.categories = distinct_categories(self.products)
        # cart entries follow the latest server copy of each product
        by_id = {p["id"]: p for p in self.products}
        self.cart = [by_id.get(p["id"], p) for p in self.cart]
        return True

    # ---------------------------
    # Filtering
    # ---------------------------
    def set_search(self, text: str) -> None:
        self.search = text or ""

    def set_category(self, category: str) -> None:
        self.category = category or ""

    @property
    def filtered(self) -> List[Dict[str, Any]]:
        return filter_products(self.products, self.search, self.category)

    def find(self, product_id: int) -> Optional[Dict[str, Any]]:
        for p in self.products:
            if p["id"] == product_id:
                return p
        return None

    # ---------------------------
    # Cart
    # ---------------------------
    def in_cart(self, product_id: int) -> bool:
        return any(p["id"] == product_id for p in self.cart)

    def add_to_cart(self, product: Dict[str, Any]) -> None:
        if not self.in_cart(product["id"]):
            self.cart.append(product)

    def remove_from_cart(self, product_id: int) -> None:
        self.cart = [p for p in self.cart if p["id"] != product_id]

    @property
    def cart_count(self) -> int:
        return len(self.cart)

    @property
    def cart_total(self) -> float:
        return round(sum(float(p["price"]) for p in self.cart), 2)

    # ---------------------------
    # Add product
    # ---------------------------
    def update_form(self, **fields: str) -> None:
        self.form.update(fields)

    def _fail_form(self, message: str) -> bool:
        self.form_error = message
        self.notify("error", message)
        return False

    def submit_add(self) -> bool:
        self.form_error = ""
        self.form_success = ""
        form = self.form
        if _blank(form.get("name")) or _blank(form.get("price")) or _blank(form.get("imageUrl")):
            return self._fail_form(REQUIRED_MESSAGE)
        try:
            price = _parse_price(form["price"])
        except ValueError:
            return self._fail_form("Price must be a non-negative number.")

        try:
            self.client.create_product(form["name"], price, form["imageUrl"], form.get("category", ""))
        except StoreError as e:
            return self._fail_form(str(e) or "Failed to add product")

        self.form = dict(EMPTY_FORM)
        self.form_success = "Product added!"
        self.notify("success", "Product added!")
        self.load()
        return True

    # ---------------------------
    # Delete product
    # ---------------------------
    def request_delete(self, product_id: int) -> None:
        self.pending_delete = product_id

    def cancel_delete(self) -> None:
        self.pending_delete = None

    def confirm_delete(self) -> bool:
        if self.pending_delete is None:
            return False
        product_id, self.pending_delete = self.pending_delete, None
        self.error_message = ""
        try:
            self.client.delete_product(product_id)
        except StoreError as e:
            self.error_message = str(e) or "Failed to delete product"
            self.notify("error", self.error_message)
            return False
        self.remove_from_cart(product_id)
        self.load()
        return True

    # ---------------------------
    # Edit product
    # ---------------------------
    def open_edit(self, product: Dict[str, Any]) -> None:
        self.editing = product
        self.edit_form = {
            "name": product.get("name", ""),
            "price": str(product.get("price", "")),
            "imageUrl": product.get("imageUrl", ""),
            "category": product.get("category") or "",
        }
        self.edit_error = ""

    def update_edit_form(self, **fields: str) -> None:
        self.edit_form.update(fields)

    def close_edit(self) -> None:
        self.editing = None
        self.edit_error = ""

    def _fail_edit(self, message: str) -> bool:
        self.edit_error = message
        self.notify("error", message)
        return False

    def _apply_locally(self, product_id: int, changes: Dict[str, Any]) -> None:
        self.products = [{**p, **changes} if p["id"] == product_id else p for p in self.products]
        self.cart = [{**p, **changes} if p["id"] == product_id else p for p in self.cart]

    def save_edit(self) -> bool:
        if self.editing is None:
            return False
        self.edit_error = ""
        form = self.edit_form
        if _blank(form.get("name")) or _blank(form.get("price")) or _blank(form.get("imageUrl")):
            return self._fail_edit(REQUIRED_MESSAGE)
        try:
            price = _parse_price(form["price"])
        except ValueError:
            return self._fail_edit("Price must be a non-negative number.")

        product = self.editing
        changes = {
            "name": form["name"],
            "price": price,
            "imageUrl": form["imageUrl"],
            "category": form.get("category", ""),
        }
        persist = self.edit_policy is not EditPolicy.CLIENT_ONLY and product.get("isLocal")

        if self.edit_policy is EditPolicy.LOCAL_ONLY and not product.get("isLocal"):
            return self._fail_edit("Only locally added products can be edited.")

        if persist:
            try:
                self.client.update_product(product["id"], changes["name"], price,
                                           changes["imageUrl"], changes["category"])
            except StoreError as e:
                return self._fail_edit(str(e) or "Failed to update product")
            self.load()
        else:
            self._apply_locally(product["id"], changes)

        self.notify("success", "Product updated!")
        self.close_edit()
        return True

    # ---------------------------
    # Detail view
    # ---------------------------
    def open_detail(self, product: Dict[str, Any]) -> Dict[str, Any]:
        # local descriptions live on the server too; the listing omits them
        try:
            data = self.client.get_product_detail(product["id"])
            description = data.get("description") or DEFAULT_DESCRIPTION
        except StoreError as e:
            logger.info("no description for product %s: %s", product["id"], e)
            description = product.get("description") or DEFAULT_DESCRIPTION
        self.detail = {**product, "description": description}
        return self.detail

    def close_detail(self) -> None:
        self.detail = None
