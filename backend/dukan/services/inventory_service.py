# backend/dukan/services/inventory_service.py
"""
Inventory ledger: product records and their stock levels.

Stock is the only contended field. decrement_stock() never commits; it is
meant to run inside a caller-owned unit of work (see sales_service) so the
decrement and whatever caused it succeed or fail together.
"""
from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db
from ..models import Product
from ..validation import MAX_ID, ConflictError
from .concurrency import lock_for_update

PRODUCT_MUTABLE_FIELDS = {
    "product_number",
    "name",
    "category",
    "cost_price_cents",
    "retail_price_cents",
    "wholesale_price_cents",
    "stock",
    "unit",
}

PRODUCT_DEFAULTS = {"wholesale_price_cents": 0, "unit": "pcs"}


class InventoryError(Exception):
    """Raised for inventory operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class ProductNotFoundError(InventoryError):
    pass


class InsufficientStockError(InventoryError):
    pass


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def _ensure_unique(product_number: str | None, name: str | None, exclude_id: int | None = None) -> None:
    """Case-sensitive uniqueness on product number and name."""
    clauses = []
    if product_number is not None:
        clauses.append(Product.product_number == product_number)
    if name is not None:
        clauses.append(Product.name == name)
    if not clauses:
        return

    query = db.session.query(Product).filter(or_(*clauses))
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    existing = query.first()
    if not existing:
        return

    if product_number is not None and existing.product_number == product_number:
        raise ConflictError("Product with this Product Number already exists.")
    raise ConflictError("Product with this name already exists.")


def find_by_id(product_id: int, *, lock: bool = False) -> Product:
    if not 0 < product_id <= MAX_ID:
        raise ProductNotFoundError("Product not found", details={"productId": product_id})
    query = db.session.query(Product).filter(Product.id == product_id)
    if lock:
        query = lock_for_update(query)
    product = query.first()
    if not product:
        raise ProductNotFoundError("Product not found", details={"productId": product_id})
    return product


def decrement_stock(product_id: int, quantity: int) -> Product:
    """
    Decrement on-hand stock inside the current transaction.

    The row is read with FOR UPDATE where supported; the version_id column
    makes a concurrent writer fail with StaleDataError at flush.
    Does not commit.
    """
    if quantity <= 0:
        raise InventoryError("quantity must be > 0", details={"productId": product_id, "quantity": quantity})

    product = find_by_id(product_id, lock=True)
    if quantity > product.stock:
        raise InsufficientStockError(
            f"Not enough stock for {product.name}",
            details={
                "productId": product.id,
                "name": product.name,
                "requested": quantity,
                "available": product.stock,
            },
        )

    product.stock -= quantity
    db.session.flush()
    return product


def list_products(sort: str = "desc") -> list[Product]:
    """All products by creation time; newest first unless sort='asc'."""
    if sort not in ("asc", "desc"):
        raise ValueError("sort must be asc or desc")
    if sort == "asc":
        order = (Product.created_at.asc(), Product.id.asc())
    else:
        order = (Product.created_at.desc(), Product.id.desc())
    return db.session.query(Product).order_by(*order).all()


def search_products(query: str) -> list[Product]:
    """
    Case-insensitive substring match on product_number.

    An empty list means nothing matched; callers decide whether that is a 404.
    """
    term = (query or "").strip()
    if not term:
        return []
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return (
        db.session.query(Product)
        .filter(Product.product_number.ilike(f"%{escaped}%", escape="\\"))
        .order_by(Product.product_number.asc(), Product.id.asc())
        .all()
    )


def create_product(*, patch: dict) -> Product:
    """
    Create product using a validated patch dict.

    Raises:
        ConflictError: If product_number or name already exists
    """
    _ensure_unique(patch.get("product_number"), patch.get("name"))

    p = Product()
    apply_product_patch(p, {**PRODUCT_DEFAULTS, **{k: v for k, v in patch.items() if v is not None}})

    db.session.add(p)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent create of the same number/name
        db.session.rollback()
        raise ConflictError("This Product Number is already taken. Please choose a different one.")
    return p


def update_product(*, product_id: int, patch: dict) -> Product:
    """
    Manual edit: price changes, stock corrections, renames.

    Raises:
        ProductNotFoundError: If the product does not exist
        ConflictError: If the new number/name collides, or the row changed underneath us
    """
    p = find_by_id(product_id)

    new_number = patch.get("product_number")
    new_name = patch.get("name")
    _ensure_unique(
        new_number if new_number != p.product_number else None,
        new_name if new_name != p.name else None,
        exclude_id=p.id,
    )

    apply_product_patch(p, patch)
    try:
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        raise ConflictError("Product was modified concurrently; reload and retry.")
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Product Number or name already exists.")
    return p


def delete_product(*, product_id: int) -> bool:
    """
    Hard-delete a product.

    Historical sales keep their name/price snapshots, so no reference check
    is made. Returns False if the product does not exist.
    """
    if not 0 < product_id <= MAX_ID:
        return False
    p = db.session.get(Product, product_id)
    if not p:
        return False
    db.session.delete(p)
    db.session.commit()
    return True
