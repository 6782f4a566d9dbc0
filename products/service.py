"""
products/service.py -- Product access control.

Every operation takes the authenticated user's id and enforces ownership:
  - list only returns the caller's own products
  - get/update/delete on someone else's product raise ForbiddenError
  - get/update/delete on a missing product raise NotFoundError

The existence check runs before the ownership check, so a missing id and a
foreign id are distinguishable (404 vs 403). Writes go through the store's
owner-conditional statements; the preceding read only decides which error
to report.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from core.config import get_settings
from core.errors import ForbiddenError, NotFoundError, ValidationError
from products.models import CATEGORIES, Product
from products.store import ProductStore

logger = logging.getLogger("productdesk.products")

_REQUIRED = ("name", "description", "price", "category")
_TEXT_FIELDS = ("name", "description", "category")
_MAX_PRICE = Decimal("9999999999.99")


# ---------------------------------------------------------------------------
# Field validation
# ---------------------------------------------------------------------------


def _clean_price(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError("Price must be a positive number")
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError("Price must be a positive number") from exc
    if not price.is_finite() or price <= 0:
        raise ValidationError("Price must be a positive number")
    if price.as_tuple().exponent < -2:
        raise ValidationError("Price must have at most 2 decimal places")
    if price > _MAX_PRICE:
        raise ValidationError("Price is too large")
    return price


def _check_category(category: str) -> None:
    if get_settings().strict_categories and category not in CATEGORIES:
        raise ValidationError(f"Category must be one of: {', '.join(CATEGORIES)}")


def _clean_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate supplied fields and return the values to store.

    A supplied text field must be a non-blank string. An empty image_url
    falls back to the configured placeholder.
    """
    cleaned: dict[str, Any] = {}
    for name in _TEXT_FIELDS:
        if name in fields:
            value = fields[name]
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"{name.capitalize()} cannot be empty")
            cleaned[name] = value
    if "category" in cleaned:
        _check_category(cleaned["category"])
    if "price" in fields:
        cleaned["price"] = _clean_price(fields["price"])
    if "image_url" in fields:
        cleaned["image_url"] = fields["image_url"] or get_settings().default_image_url
    return cleaned


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def create_product(store: ProductStore, owner_id: int, fields: dict[str, Any]) -> Product:
    """Create a product owned by owner_id.

    Raises ValidationError if name, description, price or category is
    missing, or any supplied value is invalid.
    """
    missing = [name for name in _REQUIRED if fields.get(name) in (None, "")]
    if missing:
        raise ValidationError(f"Please provide all required fields: {', '.join(missing)}")

    cleaned = _clean_fields({**fields, "image_url": fields.get("image_url") or ""})
    product = Product(
        name=cleaned["name"],
        description=cleaned["description"],
        price=cleaned["price"],
        category=cleaned["category"],
        image_url=cleaned["image_url"],
        owner_id=owner_id,
    )
    product_id = store.create_product(product)
    logger.info("User %d created product %d", owner_id, product_id)
    return store.get_product(product_id)


def list_products(store: ProductStore, owner_id: int) -> list[Product]:
    return store.list_by_owner(owner_id)


def get_product(store: ProductStore, owner_id: int, product_id: int) -> Product:
    product = store.get_product(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    if product.owner_id != owner_id:
        raise ForbiddenError("Not authorized to access this product")
    return product


def update_product(store: ProductStore, owner_id: int, product_id: int, fields: dict[str, Any]) -> Product:
    """Merge the supplied fields into the caller's product.

    Only name, description, price, category and image_url are accepted;
    anything else in fields is ignored, so owner and timestamps cannot be
    overwritten through this call.
    """
    existing = store.get_product(product_id)
    if existing is None:
        raise NotFoundError("Product not found")
    if existing.owner_id != owner_id:
        raise ForbiddenError("Not authorized to update this product")

    cleaned = _clean_fields(fields)
    if not cleaned:
        raise ValidationError("No fields to update.")

    if not store.update_owned(product_id, owner_id, **cleaned):
        # Deleted between the read above and the write.
        raise NotFoundError("Product not found")
    logger.info("User %d updated product %d (%s)", owner_id, product_id, ", ".join(sorted(cleaned)))
    return store.get_product(product_id)


def delete_product(store: ProductStore, owner_id: int, product_id: int) -> None:
    if store.delete_owned(product_id, owner_id):
        logger.info("User %d deleted product %d", owner_id, product_id)
        return
    if store.exists(product_id):
        raise ForbiddenError("Not authorized to delete this product")
    raise NotFoundError("Product not found")
