"""
api/routes/products.py -- Product CRUD routes for the ProductDesk REST API.

Routes:
  GET    /products        -- list the caller's products, newest first
  POST   /products        -- create a product owned by the caller
  GET    /products/{id}   -- product detail (owner only)
  PUT    /products/{id}   -- partial update (owner only)
  DELETE /products/{id}   -- permanent delete (owner only)

Every route requires a bearer token. Ownership is enforced by
products.service; this module only maps HTTP to service calls.

Product ids that are not positive integers are reported as 404, the same
as ids that do not exist.
"""

import re

from fastapi import APIRouter, Depends, Request

from api.models import (
    MessageResponse,
    ProductCreate,
    ProductListResponse,
    ProductOut,
    ProductResponse,
    ProductUpdate,
)
from auth.dependencies import get_current_user
from auth.models import User
from core.errors import NotFoundError
from products import service
from products.store import ProductStore

# All product routes require authentication. Handlers also take the user as
# a parameter; FastAPI resolves the dependency once per request.
router = APIRouter(dependencies=[Depends(get_current_user)])


# ASCII digits only, no leading zero, within SQLite's signed 64-bit INTEGER.
_ID_RE = re.compile(r"[1-9][0-9]{0,18}")
_MAX_ID = 2**63 - 1


def _parse_id(raw: str) -> int:
    if _ID_RE.fullmatch(raw) is None or int(raw) > _MAX_ID:
        raise NotFoundError("Product not found")
    return int(raw)


@router.get("/products", response_model=ProductListResponse)
def list_products(request: Request, current_user: User = Depends(get_current_user)) -> ProductListResponse:
    """Return the caller's products, newest first."""
    store: ProductStore = request.app.state.product_store
    products = service.list_products(store, current_user.id)
    return ProductListResponse(
        count=len(products),
        products=[ProductOut.from_product(p) for p in products],
    )


@router.post("/products", response_model=ProductResponse, status_code=201)
def create_product(
    request: Request,
    body: ProductCreate,
    current_user: User = Depends(get_current_user),
) -> ProductResponse:
    """Create a product. imageUrl defaults to a placeholder when omitted."""
    store: ProductStore = request.app.state.product_store
    product = service.create_product(store, current_user.id, body.model_dump())
    return ProductResponse(message="Product created successfully", product=ProductOut.from_product(product))


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(
    request: Request,
    product_id: str,
    current_user: User = Depends(get_current_user),
) -> ProductResponse:
    store: ProductStore = request.app.state.product_store
    product = service.get_product(store, current_user.id, _parse_id(product_id))
    return ProductResponse(product=ProductOut.from_product(product))


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    request: Request,
    product_id: str,
    body: ProductUpdate,
    current_user: User = Depends(get_current_user),
) -> ProductResponse:
    """Apply only the fields present in the body. Owner is never changed."""
    store: ProductStore = request.app.state.product_store
    product = service.update_product(
        store,
        current_user.id,
        _parse_id(product_id),
        body.model_dump(exclude_unset=True),
    )
    return ProductResponse(message="Product updated successfully", product=ProductOut.from_product(product))


@router.delete("/products/{product_id}", response_model=MessageResponse)
def delete_product(
    request: Request,
    product_id: str,
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    store: ProductStore = request.app.state.product_store
    service.delete_product(store, current_user.id, _parse_id(product_id))
    return MessageResponse(message="Product deleted successfully")
