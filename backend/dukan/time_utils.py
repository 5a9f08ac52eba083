from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

_ISO_DAY = re.compile(r"\d{4}-\d{2}-\d{2}")


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a calendar date in YYYY-MM-DD form.

    - None / "" -> None
    - anything else that is not a real YYYY-MM-DD date raises ValueError
      (fromisoformat alone would also take 20240115 or 2024-W03-1)
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    if not _ISO_DAY.fullmatch(s):
        raise ValueError(f"expected YYYY-MM-DD, got {s!r}")
    return date.fromisoformat(s)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")


def local_midnight_utc(day: date, tz: ZoneInfo) -> datetime:
    """UTC-naive instant at which `day` begins in `tz`."""
    local = datetime.combine(day, time.min, tzinfo=tz)
    return local.astimezone(timezone.utc).replace(tzinfo=None)


def local_day_window(start_day: date, end_day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """
    Half-open UTC-naive window [start_day 00:00, end_day+1 00:00) in `tz`.

    The exclusive upper bound covers 23:59:59.999 of end_day without
    depending on storage precision.
    """
    return local_midnight_utc(start_day, tz), local_midnight_utc(end_day + timedelta(days=1), tz)


def local_date(dt: datetime, tz: ZoneInfo) -> date:
    """Calendar date of a stored (UTC-naive) timestamp as seen in `tz`."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz).date()


def local_today(tz: ZoneInfo, now: Optional[datetime] = None) -> date:
    return local_date(now or utcnow(), tz)
