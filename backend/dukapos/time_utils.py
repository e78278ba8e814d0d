from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional


def now() -> datetime:
    """Server-side 'now' in server-local time (naive, canonical)."""
    return datetime.now()


def start_of_day(value: date | datetime) -> datetime:
    """Local midnight at the start of the given calendar day."""
    if isinstance(value, datetime):
        value = value.date()
    return datetime(value.year, value.month, value.day)


def day_window(value: date | datetime) -> tuple[datetime, datetime]:
    """
    Half-open window [start_of_day, start_of_day + 1 day).

    23:59:59.999 belongs to the day; the following 00:00:00 does not.
    """
    start = start_of_day(value)
    return start, start + timedelta(days=1)


def month_start(value: date | datetime) -> datetime:
    return datetime(value.year, value.month, 1)


def previous_month_start(value: date | datetime) -> datetime:
    first = month_start(value)
    last_of_prev = first - timedelta(days=1)
    return datetime(last_of_prev.year, last_of_prev.month, 1)


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """
    Parse "YYYY-MM-DD" (a full ISO datetime is accepted and truncated).

    - None / "" -> None
    - malformed input raises ValueError
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    if len(s) == 10:
        return date.fromisoformat(s)
    return datetime.fromisoformat(s).date()


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes a naive local datetime to ISO-8601 (second precision).
    """
    if dt is None:
        return None
    return dt.replace(microsecond=0).isoformat()
