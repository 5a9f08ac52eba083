from __future__ import annotations

from ..extensions import db
from ..money_utils import from_cents
from ..time_utils import to_utc_z, utcnow


class Product(db.Model):
    """
    Product master data.

    SKU DESIGN DECISION:
    product_number is the human-assigned SKU and is globally unique, as is
    the display name. The system-generated id is what sales reference.

    Prices are stored in cents. stock is the only contended mutable field;
    version_id turns concurrent lost updates into StaleDataError.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.UniqueConstraint("product_number", name="uq_products_product_number"),
        db.UniqueConstraint("name", name="uq_products_name"),
        db.CheckConstraint("stock >= 0", name="ck_products_stock_nonnegative"),
        db.Index("ix_products_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    product_number = db.Column(db.String(64), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(128), nullable=False)

    cost_price_cents = db.Column(db.Integer, nullable=False)
    retail_price_cents = db.Column(db.Integer, nullable=False)
    wholesale_price_cents = db.Column(db.Integer, nullable=False, default=0)

    stock = db.Column(db.Integer, nullable=False, default=0)
    unit = db.Column(db.String(32), nullable=False, default="pcs")

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product id={self.id} product_number={self.product_number!r} name={self.name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productNumber": self.product_number,
            "name": self.name,
            "category": self.category,
            "costPrice": from_cents(self.cost_price_cents),
            "retailPrice": from_cents(self.retail_price_cents),
            "wholesalePrice": from_cents(self.wholesale_price_cents),
            "stock": self.stock,
            "unit": self.unit,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
