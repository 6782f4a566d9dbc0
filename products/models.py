"""
products/models.py -- Domain dataclass for product records.

Pure data container. Ownership rules live in products/service.py and the
SQL that enforces them lives in products/store.py.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

# The fixed category list offered by clients. Whether the server enforces it
# is controlled by Settings.strict_categories.
CATEGORIES: tuple[str, ...] = (
    "Electronics",
    "Clothing",
    "Food",
    "Books",
    "Home",
    "Sports",
    "Beauty",
    "Toys",
    "Other",
)


@dataclass
class Product:
    """A product record owned by exactly one user.

    owner_id is set on insert and never changes; the store has no code path
    that writes it afterwards.

    id is None before the record is written to the database.
    """

    name: str
    description: str
    price: Decimal
    category: str
    owner_id: int
    image_url: str = ""
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, refreshed on every update
