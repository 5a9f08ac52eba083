# Overview: Service-layer operations for expenses; append-only log.

from __future__ import annotations

from ..extensions import db
from ..models import Expense
from ..money_utils import to_cents
from ..validation import ValidationError, enforce_rules_expense

MAX_TEXT_LENGTH = 1000


def _clean_text(value, field: str, max_length: int) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError(f"{field} exceeds max length {max_length}")
    return value or None


def add_expense(*, amount, description=None, category=None) -> Expense:
    """
    Append an expense entry.

    Raises:
        ValidationError: amount missing, non-numeric or <= 0
    """
    if amount is None:
        raise ValidationError("Valid amount is required")
    try:
        amount_cents = to_cents(amount)
    except ValueError:
        raise ValidationError("Valid amount is required")
    enforce_rules_expense(amount_cents)

    expense = Expense(
        amount_cents=amount_cents,
        description=_clean_text(description, "description", MAX_TEXT_LENGTH),
        category=_clean_text(category, "category", 128),
    )
    db.session.add(expense)
    db.session.commit()
    return expense
