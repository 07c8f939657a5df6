# storefront/main.py
import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from .catalog import Catalog
from .config import settings
from .core import ProductIn, _make_product_dict, _make_product_list
from .database import LocalStore
from .errors import InvalidInput, NotFound, StoreError, UpstreamUnavailable
from .upstream import FakeStoreClient

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="storefront (remote catalog + in-memory local products)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------
# Process-wide catalog (local products reset on restart)
# ---------------------------
_catalog = Catalog(
    upstream=FakeStoreClient(settings.upstream_base_url),
    store=LocalStore(id_offset=settings.local_id_offset),
)


def get_catalog() -> Catalog:
    return _catalog


def _http_error(exc: StoreError) -> HTTPException:
    if isinstance(exc, InvalidInput):
        return HTTPException(status_code=400, detail={"error": str(exc), "fields": exc.fields})
    if isinstance(exc, NotFound):
        return HTTPException(status_code=404, detail={"error": str(exc)})
    if isinstance(exc, UpstreamUnavailable):
        return HTTPException(status_code=502, detail={"error": str(exc)})
    return HTTPException(status_code=500, detail={"error": str(exc)})


def _require_id(id: Optional[int]) -> int:
    if id is None:
        raise HTTPException(status_code=400, detail={"error": "Missing id", "fields": ["id"]})
    return id


# ---------------------------
# Product endpoints
# ---------------------------
@app.get("/api/products")
async def list_products(catalog: Catalog = Depends(get_catalog)):
    try:
        products = await catalog.list_products()
    except StoreError as e:
        raise _http_error(e)
    return _make_product_list(products)


@app.post("/api/products", status_code=201)
async def create_product(payload: ProductIn, catalog: Catalog = Depends(get_catalog)):
    try:
        product = await catalog.create_local_product(
            payload.name, payload.price, payload.image_url, payload.category, payload.description
        )
    except StoreError as e:
        raise _http_error(e)
    return _make_product_dict(product)


@app.put("/api/products")
async def update_product(payload: ProductIn, id: Optional[int] = Query(None),
                         catalog: Catalog = Depends(get_catalog)):
    product_id = _require_id(id)
    try:
        product = await catalog.update_local_product(
            product_id, payload.name, payload.price, payload.image_url, payload.category, payload.description
        )
    except StoreError as e:
        raise _http_error(e)
    return _make_product_dict(product)


@app.delete("/api/products")
async def delete_product(id: Optional[int] = Query(None), catalog: Catalog = Depends(get_catalog)):
    product_id = _require_id(id)
    try:
        product = await catalog.delete_local_product(product_id)
    except StoreError as e:
        raise _http_error(e)
    return _make_product_dict(product)


@app.get("/api/products/detail")
async def product_detail(id: Optional[int] = Query(None), catalog: Catalog = Depends(get_catalog)):
    product_id = _require_id(id)
    try:
        product = await catalog.get_product_detail(product_id)
    except StoreError as e:
        raise _http_error(e)
    return _make_product_dict(product, with_description=True)
