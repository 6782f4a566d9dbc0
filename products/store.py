"""
products/store.py -- SQLAlchemy-backed persistence layer for products.

Uses SQLAlchemy Core (not ORM) so the dataclass in products/models.py stays
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change.

Pattern: Repository + Data Mapper. ProductStore is the repository;
_row_to_product is the mapper. Services never touch SQL directly.

Ownership: update_owned() and delete_owned() put the owner in the WHERE
clause, so the ownership check and the write are one statement. There is no
window in which another request can change the row between the two.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = ProductStore("sqlite:///:memory:")
    product_id = store.create_product(product)
    store.list_by_owner(owner_id)
    store.update_owned(product_id, owner_id, price=Decimal("2.50"))
    store.close()
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, Numeric, String, Table, Text, select
from sqlalchemy.engine import Engine

from core.config import get_settings
from core.db import make_engine, now_iso
from products.models import Product

# Columns update_owned() may write. owner_id, id and created_at are absent.
_MUTABLE_FIELDS = frozenset({"name", "description", "price", "category", "image_url"})

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(200), nullable=False),
    Column("description", Text, nullable=False),
    Column("price", Numeric(12, 2, asdecimal=True), nullable=False),
    Column("category", String(100), nullable=False),
    Column("image_url", Text, nullable=False),
    Column("owner_id", Integer, nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


class ProductStore:
    """Repository for Product entities."""

    def __init__(self, db_url: Optional[str] = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        metadata.create_all(self.engine)

    def create_product(self, product: Product) -> int:
        """Insert a product and return its ID. created_at/updated_at are stamped here."""
        stamp = now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _products.insert().values(
                    name=product.name,
                    description=product.description,
                    price=product.price,
                    category=product.category,
                    image_url=product.image_url,
                    owner_id=product.owner_id,
                    created_at=stamp,
                    updated_at=stamp,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_product(self, product_id: int) -> Optional[Product]:
        with self.engine.connect() as conn:
            row = conn.execute(_products.select().where(_products.c.id == product_id)).fetchone()
        return _row_to_product(row) if row is not None else None

    def exists(self, product_id: int) -> bool:
        with self.engine.connect() as conn:
            row = conn.execute(select(_products.c.id).where(_products.c.id == product_id)).fetchone()
        return row is not None

    def list_by_owner(self, owner_id: int) -> list[Product]:
        """Return the owner's products, newest first.

        id is the tie-breaker for rows stamped within the same microsecond.
        """
        with self.engine.connect() as conn:
            rows = conn.execute(
                _products.select()
                .where(_products.c.owner_id == owner_id)
                .order_by(_products.c.created_at.desc(), _products.c.id.desc())
            ).fetchall()
        return [_row_to_product(r) for r in rows]

    def update_owned(self, product_id: int, owner_id: int, /, **fields) -> bool:
        """Apply a partial update if and only if owner_id owns the product.

        Returns True if a row was updated, False if the product does not exist
        or belongs to someone else. Unknown field names raise ValueError.
        """
        unknown = set(fields) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown or immutable product fields: {sorted(unknown)!r}")
        with self.engine.connect() as conn:
            result = conn.execute(
                _products.update()
                .where((_products.c.id == product_id) & (_products.c.owner_id == owner_id))
                .values(updated_at=now_iso(), **fields)
            )
            conn.commit()
        return result.rowcount > 0

    def delete_owned(self, product_id: int, owner_id: int) -> bool:
        """Permanently delete the product if owner_id owns it. Returns True if deleted."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _products.delete().where((_products.c.id == product_id) & (_products.c.owner_id == owner_id))
            )
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_product(row) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        description=row.description,
        price=Decimal(row.price),
        category=row.category,
        image_url=row.image_url,
        owner_id=row.owner_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
