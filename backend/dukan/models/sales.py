from __future__ import annotations

from ..extensions import db
from ..money_utils import from_cents
from ..time_utils import to_utc_z, utcnow

PAYMENT_METHODS = ("Cash", "Card")


class Sale(db.Model):
    """
    Committed sale (immutable once created).

    WHY: A sale is the record of what was charged, not a view over the
    catalog. Totals and profit are frozen at commit time so invoices and
    reports stay correct after products are repriced or deleted.

    created_at is assigned by the server and is the only timestamp used for
    day bucketing.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.CheckConstraint("payment_method IN ('Cash', 'Card')", name="ck_sales_payment_method"),
        db.Index("ix_sales_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Totals (all amounts in cents)
    subtotal_cents = db.Column(db.Integer, nullable=False)
    tax_cents = db.Column(db.Integer, nullable=False)
    discount_cents = db.Column(db.Integer, nullable=False, default=0)
    total_amount_cents = db.Column(db.Integer, nullable=False)
    total_profit_cents = db.Column(db.Integer, nullable=False)

    payment_method = db.Column(db.String(16), nullable=False, default="Cash")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    items = db.relationship(
        "SaleItem",
        back_populates="sale",
        order_by="SaleItem.line_number",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "items": [item.to_dict() for item in self.items],
            "subtotal": from_cents(self.subtotal_cents),
            "tax": from_cents(self.tax_cents),
            "discount": from_cents(self.discount_cents),
            "totalAmount": from_cents(self.total_amount_cents),
            "totalProfit": from_cents(self.total_profit_cents),
            "paymentMethod": self.payment_method,
            "createdAt": to_utc_z(self.created_at),
        }


class SaleItem(db.Model):
    """
    Line item snapshot on a sale.

    product_id is a weak reference (no foreign key): products may be deleted
    later without touching historical sales. name, unit price and cost price
    are copied at commit time.
    """
    __tablename__ = "sale_items"
    __table_args__ = (
        db.UniqueConstraint("sale_id", "line_number", name="uq_sale_items_sale_line"),
        db.CheckConstraint("quantity > 0", name="ck_sale_items_quantity_positive"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    sale_id = db.Column(db.Integer, db.ForeignKey("sales.id"), nullable=False, index=True)
    line_number = db.Column(db.Integer, nullable=False)

    product_id = db.Column(db.Integer, nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    unit_cost_cents = db.Column(db.Integer, nullable=False)

    sale = db.relationship("Sale", back_populates="items")

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "price": from_cents(self.unit_price_cents),
            "costPrice": from_cents(self.unit_cost_cents),
            "lineTotal": from_cents(self.line_total_cents),
        }
