"""
Sales Service - commits a cart as one immutable sale

WHY: The stock decrement and the sale record are one fact. Either both
exist or neither does, and two checkouts racing for the last units of a
product cannot both succeed.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from ..extensions import db
from ..models import Sale, SaleItem, PAYMENT_METHODS
from ..money_utils import apply_rate_bps, to_cents
from ..time_utils import utcnow
from ..validation import MAX_ID, MAX_PRICE_CENTS, MAX_QUANTITY, ValidationError, coerce_int
from .concurrency import begin_write_transaction, run_with_retry
from .inventory_service import decrement_stock

# Fixed 10% sales tax, in basis points
TAX_RATE_BPS = 1000


class SaleError(Exception):
    """Raised for sale operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class EmptyCartError(SaleError):
    pass


class SaleValidationError(SaleError):
    pass


@dataclass(frozen=True)
class CartLine:
    product_id: int
    quantity: int
    unit_price_cents: int


def _line_int(raw: dict, field: str, index: int, upper: int) -> int:
    try:
        value = coerce_int(raw.get(field), f"items[{index}].{field}")
    except ValidationError as exc:
        raise SaleValidationError(str(exc), details={"index": index})
    if value <= 0:
        raise SaleValidationError(f"items[{index}].{field} must be > 0", details={"index": index})
    if value > upper:
        raise SaleValidationError(f"items[{index}].{field} cannot exceed {upper:,}", details={"index": index})
    return value


def parse_cart(items) -> list[CartLine]:
    """
    Normalize client cart lines ({productId, quantity, price}) into CartLines.

    Raises EmptyCartError for a missing/empty list and SaleValidationError for
    malformed or out-of-range lines. Runs before any database work.
    """
    if not items:
        raise EmptyCartError("No items provided")
    if not isinstance(items, list):
        raise SaleValidationError("items must be a list")

    lines = []
    for i, raw in enumerate(items):
        if not isinstance(raw, dict):
            raise SaleValidationError(f"items[{i}] must be an object", details={"index": i})

        product_id = _line_int(raw, "productId", i, MAX_ID)
        quantity = _line_int(raw, "quantity", i, MAX_QUANTITY)

        try:
            price_cents = to_cents(raw.get("price"))
        except ValueError:
            raise SaleValidationError(f"items[{i}].price must be a number", details={"index": i})
        if price_cents < 0:
            raise SaleValidationError(f"items[{i}].price must be >= 0", details={"index": i})
        if price_cents > MAX_PRICE_CENTS:
            raise SaleValidationError(
                f"items[{i}].price cannot exceed {MAX_PRICE_CENTS / 100:,.2f}", details={"index": i}
            )

        lines.append(CartLine(product_id=product_id, quantity=quantity, unit_price_cents=price_cents))
    return lines


def _validate_payment_method(payment_method: str | None) -> str:
    if payment_method is None:
        return "Cash"
    if payment_method not in PAYMENT_METHODS:
        raise SaleValidationError(
            f"paymentMethod must be one of {', '.join(PAYMENT_METHODS)}",
            details={"paymentMethod": payment_method},
        )
    return payment_method


def _commit_sale_locked(lines: list[CartLine], payment_method: str) -> Sale:
    subtotal_cents = 0
    profit_cents = 0
    sale_items = []

    for i, line in enumerate(lines):
        # Cost is read from the same row version that is decremented, so the
        # profit snapshot matches the stock that actually left the shelf.
        product = decrement_stock(line.product_id, line.quantity)

        subtotal_cents += line.unit_price_cents * line.quantity
        profit_cents += (line.unit_price_cents - product.cost_price_cents) * line.quantity

        sale_items.append(
            SaleItem(
                line_number=i + 1,
                product_id=product.id,
                name=product.name,
                quantity=line.quantity,
                unit_price_cents=line.unit_price_cents,
                unit_cost_cents=product.cost_price_cents,
            )
        )

    tax_cents = apply_rate_bps(subtotal_cents, TAX_RATE_BPS)
    discount_cents = 0

    sale = Sale(
        subtotal_cents=subtotal_cents,
        tax_cents=tax_cents,
        discount_cents=discount_cents,
        total_amount_cents=subtotal_cents + tax_cents - discount_cents,
        total_profit_cents=profit_cents,
        payment_method=payment_method,
        created_at=utcnow(),
        items=sale_items,
    )
    db.session.add(sale)
    db.session.flush()
    return sale


def commit_sale(items, payment_method: str | None = None) -> Sale:
    """
    Validate a cart, decrement stock and persist the sale atomically.

    Raises:
        EmptyCartError / SaleValidationError: malformed cart (no writes)
        ProductNotFoundError / InsufficientStockError: from the inventory
            ledger; every decrement made so far is rolled back
    """
    lines = parse_cart(items)
    method = _validate_payment_method(payment_method)

    def _op():
        begin_write_transaction()
        sale = _commit_sale_locked(lines, method)
        db.session.commit()
        return sale

    sale = run_with_retry(_op)
    current_app.logger.info(
        "Committed sale %s: %d line(s), total_cents=%d, profit_cents=%d",
        sale.id, len(lines), sale.total_amount_cents, sale.total_profit_cents,
    )
    return sale


def get_sale(sale_id: int) -> Sale | None:
    return db.session.get(Sale, sale_id)


def list_sales(limit: int = 50) -> list[Sale]:
    """Most recent sales first."""
    limit = max(1, min(limit, 500))
    return (
        db.session.query(Sale)
        .order_by(Sale.created_at.desc(), Sale.id.desc())
        .limit(limit)
        .all()
    )
