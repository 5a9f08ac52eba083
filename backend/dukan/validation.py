# Overview: Payload validation for catalog and expense writes; maps client JSON onto model columns.

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .money_utils import to_cents


# 9,999,999.99 is the largest amount any money field accepts
MAX_PRICE_CENTS = 999_999_999

# Largest quantity or stock count a single write may carry
MAX_QUANTITY = 1_000_000

# Ids are SQLite INTEGER primary keys
MAX_ID = 2**63 - 1

_PLAIN_INT = re.compile(r"[+-]?\d+")


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """Duplicate product number or name, or a concurrent edit."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Which client fields a route may write.

    fields maps the camelCase JSON key to the column key; anything else in
    the payload is rejected. required_on_create lists JSON keys that must be
    present (and non-null) when creating.
    """
    fields: dict[str, str]
    required_on_create: set[str] = field(default_factory=set)


def coerce_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # 5.0 arrives from JS number inputs
        if value.is_integer():
            return int(value)
        raise ValidationError(f"{name} must be an integer, not a decimal")
    if isinstance(value, str) and _PLAIN_INT.fullmatch(value.strip()):
        return int(value.strip())
    raise ValidationError(f"{name} must be an integer")


def _as_text(value: Any, name: str) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValidationError(f"{name} must be a string")
    return str(value).strip()


def _coerce_value(col, value: Any, name: str):
    if col.key.endswith("_cents"):
        try:
            return to_cents(value)
        except ValueError:
            raise ValidationError(f"{name} must be a number")
    if isinstance(col.type, Integer):
        return coerce_int(value, name)
    if isinstance(col.type, (String, Text)):
        text = _as_text(value, name)
        if not text and not col.nullable:
            raise ValidationError(f"{name} cannot be blank")
        max_length = getattr(col.type, "length", None)
        if max_length and len(text) > max_length:
            raise ValidationError(f"{name} exceeds max length {max_length}")
        return text
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Check a JSON body against the policy and the model's column metadata.

    Returns a patch keyed by column name, with money converted to cents and
    strings stripped. partial=True is PATCH semantics: only the keys given
    are validated and required_on_create is not enforced.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    unknown = [k for k in payload if k not in policy.fields]
    if unknown:
        raise ValidationError(f"Field not allowed: {unknown[0]}")

    if not partial:
        missing = sorted(k for k in policy.required_on_create if payload.get(k) is None)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    columns = {c.key: c for c in model.__mapper__.columns}
    patch: dict = {}
    for key, raw in payload.items():
        col = columns[policy.fields[key]]
        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{key} cannot be null")
            patch[col.key] = None
        else:
            patch[col.key] = _coerce_value(col, raw, key)
    return patch


def _check_amount(cents: int, label: str) -> None:
    if cents < 0:
        raise ValidationError(f"{label} must be >= 0")
    if cents > MAX_PRICE_CENTS:
        raise ValidationError(f"{label} cannot exceed {MAX_PRICE_CENTS / 100:,.2f}")


def enforce_rules_product(patch: dict) -> None:
    """Prices and stock must be non-negative and bounded. Retail below cost is allowed."""
    for key, label in (
        ("cost_price_cents", "costPrice"),
        ("retail_price_cents", "retailPrice"),
        ("wholesale_price_cents", "wholesalePrice"),
    ):
        if patch.get(key) is not None:
            _check_amount(patch[key], label)

    stock = patch.get("stock")
    if stock is not None and stock < 0:
        raise ValidationError("stock must be >= 0")
    if stock is not None and stock > MAX_QUANTITY:
        raise ValidationError(f"stock cannot exceed {MAX_QUANTITY:,}")


def enforce_rules_expense(amount_cents: int | None) -> None:
    if amount_cents is None or amount_cents <= 0:
        raise ValidationError("Valid amount is required")
    _check_amount(amount_cents, "amount")
