from __future__ import annotations

import calendar
from datetime import date, datetime, timezone
from typing import Any, Optional


# Provider values meaning "no end date"
STILL_EMPLOYED = frozenset({"", "present", "current", "now", "ongoing", "null", "none"})

_PARTIAL_FORMATS = ("%Y-%m-%d", "%Y-%m", "%Y/%m/%d", "%Y/%m", "%Y")


def parse_date(value: Any) -> Optional[date]:
    """Parse provider dates: ISO dates/datetimes, YYYY-MM and YYYY.

    Returns None when the value cannot be understood.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    for fmt in _PARTIAL_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def is_still_employed_marker(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip().lower() in STILL_EMPLOYED


def months_ago(today: date, months: int) -> date:
    """Same calendar day ``months`` back, clamped to the end of shorter months."""
    month_index = today.year * 12 + (today.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(today.day, last_day))


def months_between(start: date, end: date) -> float:
    """Elapsed months using 30-day months, clamped at zero."""
    return max(0.0, (end - start).days / 30.0)


def to_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utc_iso(moment: Optional[datetime] = None) -> str:
    """Sortable UTC timestamp text used for every stored timestamp."""
    return to_utc(moment or datetime.now(timezone.utc)).isoformat(timespec="seconds")
