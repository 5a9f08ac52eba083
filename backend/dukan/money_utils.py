# Overview: Conversions between client-facing decimal amounts and stored integer cents.

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

# Authoritative storage is integer cents; JSON carries decimal amounts.
CENTS = Decimal("100")


def to_cents(value) -> int:
    """
    Convert a decimal amount (int, float or numeric string) to integer cents.

    Rounds half-up at the cent. Raises ValueError for anything non-numeric,
    including booleans, NaN and infinities.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError("amount must be a number")
    if isinstance(value, str):
        value = value.strip()
    try:
        # str() keeps floats like 0.1 from dragging binary noise into Decimal
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError("amount must be a number")
    if not amount.is_finite():
        raise ValueError("amount must be a finite number")
    return int((amount * CENTS).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int | None) -> float:
    """Decimal amount rounded to 2 places, as emitted in JSON."""
    if cents is None:
        return 0.0
    return float((Decimal(int(cents)) / CENTS).quantize(Decimal("0.01")))


def apply_rate_bps(cents: int, rate_bps: int) -> int:
    """Apply a basis-point rate to a cent amount, rounding half-up."""
    scaled = Decimal(int(cents)) * Decimal(int(rate_bps)) / Decimal(10_000)
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
