from __future__ import annotations

from ..extensions import db
from ..money_utils import from_cents
from ..time_utils import to_utc_z, utcnow


class Expense(db.Model):
    """Miscellaneous shop expense. Append-only; never updated or deleted."""
    __tablename__ = "expenses"
    __table_args__ = (
        db.CheckConstraint("amount_cents > 0", name="ck_expenses_amount_positive"),
        db.Index("ix_expenses_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    amount_cents = db.Column(db.Integer, nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(128), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "amount": from_cents(self.amount_cents),
            "description": self.description,
            "category": self.category,
            "createdAt": to_utc_z(self.created_at),
        }
