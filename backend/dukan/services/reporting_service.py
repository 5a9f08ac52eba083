# Overview: Service-layer operations for reporting; day-bucketed rollups over the sale and expense logs.

from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import func

from ..extensions import db
from ..models import Expense, Product, Sale
from ..money_utils import from_cents
from ..time_utils import local_date, local_day_window, local_today, parse_iso_date

# Products at or below this many units count as low stock
LOW_STOCK_THRESHOLD = 10

# Default window: the last 7 calendar days including today
DEFAULT_RANGE_DAYS = 7

"""
Reporting invariants

- totalSales is always the tax-exclusive subtotal; profit is computed
  against pre-tax prices, so both sides of a report use the same base.
- Day buckets are calendar dates in the caller's timezone. Stored
  timestamps are UTC; they are converted before grouping, never grouped
  by UTC or server-local date.
- Sums are done in integer cents and rounded to 2 places on output.
"""


class ReportError(Exception):
    """Raised when report generation fails."""
    pass


class InvalidDateRangeError(ReportError):
    pass


def resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ReportError(f"Unknown timezone: {name}")


def _coerce_day(value, label: str) -> date | None:
    if value is None or isinstance(value, date):
        return value
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError):
        raise InvalidDateRangeError(f"{label} must be a date in YYYY-MM-DD format")


def resolve_date_range(start, end, *, today: date) -> tuple[date, date]:
    """
    Turn optional start/end inputs into an inclusive (start_day, end_day).

    Neither given -> the last DEFAULT_RANGE_DAYS days ending today.
    Only one given, an unparseable value, or start after end -> InvalidDateRangeError.
    """
    start_day = _coerce_day(start, "startDate")
    end_day = _coerce_day(end, "endDate")

    if start_day is None and end_day is None:
        return today - timedelta(days=DEFAULT_RANGE_DAYS - 1), today
    if start_day is None or end_day is None:
        raise InvalidDateRangeError("startDate and endDate must be supplied together")
    if start_day > end_day:
        raise InvalidDateRangeError("startDate must not be after endDate")
    return start_day, end_day


def _window(start, end, tz: ZoneInfo, now: datetime | None) -> tuple[datetime, datetime]:
    start_day, end_day = resolve_date_range(start, end, today=local_today(tz, now))
    return local_day_window(start_day, end_day, tz)


def _bucket_by_day(rows, tz: ZoneInfo, width: int) -> dict[str, list[int]]:
    """rows are (created_at, *cent_values); returns {YYYY-MM-DD: [sums...]}."""
    buckets: dict[str, list[int]] = {}
    for created_at, *values in rows:
        key = local_date(created_at, tz).isoformat()
        sums = buckets.setdefault(key, [0] * width)
        for i, v in enumerate(values):
            sums[i] += int(v or 0)
    return buckets


def daily_sales_report(
    *,
    start=None,
    end=None,
    timezone: str,
    now: datetime | None = None,
) -> list[dict]:
    """Per-day totalSales (subtotal) and totalProfit, ascending by date."""
    tz = resolve_timezone(timezone)
    lo, hi = _window(start, end, tz, now)

    rows = db.session.query(
        Sale.created_at,
        Sale.subtotal_cents,
        Sale.total_profit_cents,
    ).filter(
        Sale.created_at >= lo,
        Sale.created_at < hi,
    ).all()

    buckets = _bucket_by_day(rows, tz, 2)
    return [
        {
            "date": day,
            "totalSales": from_cents(buckets[day][0]),
            "totalProfit": from_cents(buckets[day][1]),
        }
        for day in sorted(buckets)
    ]


def daily_expense_report(
    *,
    start=None,
    end=None,
    timezone: str,
    now: datetime | None = None,
) -> list[dict]:
    """Per-day totalExpense, ascending by date."""
    tz = resolve_timezone(timezone)
    lo, hi = _window(start, end, tz, now)

    rows = db.session.query(
        Expense.created_at,
        Expense.amount_cents,
    ).filter(
        Expense.created_at >= lo,
        Expense.created_at < hi,
    ).all()

    buckets = _bucket_by_day(rows, tz, 1)
    return [
        {"date": day, "totalExpense": from_cents(buckets[day][0])}
        for day in sorted(buckets)
    ]


def dashboard_snapshot(*, timezone: str, now: datetime | None = None) -> dict:
    """
    Catalog counts plus today's takings.

    todaysProfit and allTimeProfit are reported separately. totalProfit keeps
    the storefront's behavior: today's profit, or all-time profit when today's
    is zero.
    """
    tz = resolve_timezone(timezone)
    today = local_today(tz, now)
    lo, hi = local_day_window(today, today, tz)

    total_products = db.session.query(func.count(Product.id)).scalar() or 0
    total_stock = db.session.query(func.coalesce(func.sum(Product.stock), 0)).scalar() or 0
    low_stock_count = db.session.query(func.count(Product.id)).filter(
        Product.stock <= LOW_STOCK_THRESHOLD
    ).scalar() or 0

    todays_sales_cents, todays_profit_cents = db.session.query(
        func.coalesce(func.sum(Sale.subtotal_cents), 0),
        func.coalesce(func.sum(Sale.total_profit_cents), 0),
    ).filter(
        Sale.created_at >= lo,
        Sale.created_at < hi,
    ).one()

    all_time_profit_cents = db.session.query(
        func.coalesce(func.sum(Sale.total_profit_cents), 0)
    ).scalar() or 0

    todays_profit = from_cents(todays_profit_cents)
    all_time_profit = from_cents(all_time_profit_cents)

    return {
        "date": today.isoformat(),
        "totalProducts": int(total_products),
        "totalStock": int(total_stock),
        "lowStockCount": int(low_stock_count),
        "lowStockThreshold": LOW_STOCK_THRESHOLD,
        "todaysSales": from_cents(todays_sales_cents),
        "todaysProfit": todays_profit,
        "allTimeProfit": all_time_profit,
        "totalProfit": todays_profit or all_time_profit,
    }
