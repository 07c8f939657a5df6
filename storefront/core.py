import math
from typing import Optional, Dict, Any, List, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidInput, UpstreamUnavailable
from .models import RemoteProduct, LocalProduct

REQUIRED_FIELDS = ("name", "price", "imageUrl")

DEFAULT_DESCRIPTION = "No description available."


class ProductIn(BaseModel):
    # required fields are checked by validate_product_fields so that a
    # missing value answers 400 with the field names, not a schema error
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    price: Optional[Union[float, str]] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    category: Optional[str] = ""
    description: Optional[str] = None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_product_fields(name: Any, price: Any, image_url: Any) -> Tuple[str, float, str]:
    missing = [
        field for field, value in zip(REQUIRED_FIELDS, (name, price, image_url))
        if _is_blank(value)
    ]
    if missing:
        raise InvalidInput(f"Missing required fields: {', '.join(missing)}", fields=missing)

    not_text = [field for field, value in (("name", name), ("imageUrl", image_url)) if not isinstance(value, str)]
    if not_text:
        raise InvalidInput(f"Fields must be text: {', '.join(not_text)}", fields=not_text)

    try:
        amount = float(price)
    except (TypeError, ValueError):
        raise InvalidInput("price must be a number", fields=["price"])
    if math.isnan(amount) or math.isinf(amount) or amount < 0:
        raise InvalidInput("price must be a non-negative number", fields=["price"])

    return name.strip(), amount, image_url.strip()


def remote_from_upstream(item: Dict[str, Any]) -> RemoteProduct:
    """Map one upstream catalog entry ({id, title, price, image, category})."""
    try:
        return RemoteProduct(
            id=item["id"],
            name=item["title"],
            price=item["price"],
            image_url=item["image"],
            category=item.get("category") or "",
            description=item.get("description"),
        )
    except (KeyError, TypeError, ValidationError) as exc:
        raise UpstreamUnavailable(f"malformed upstream product: {exc}") from exc


def _make_product_dict(product: Union[RemoteProduct, LocalProduct], with_description: bool = False) -> Dict[str, Any]:
    out = {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "imageUrl": product.image_url,
        "category": product.category,
        "isLocal": isinstance(product, LocalProduct),
    }
    if with_description:
        out["description"] = product.description or DEFAULT_DESCRIPTION
    return out


def _make_product_list(products: List[Union[RemoteProduct, LocalProduct]]) -> List[Dict[str, Any]]:
    return [_make_product_dict(p) for p in products]
