from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Union


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def to_date(value: Union[date, datetime, str]) -> date:
    """Coerce a stored date value (date, datetime or ISO string) to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value)[:10])


def date_key(value: date) -> str:
    """Attendance records are keyed by a YYYY-MM-DD string."""
    return value.strftime("%Y-%m-%d")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month (both inclusive)."""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def month_name(month: int) -> str:
    return calendar.month_name[month]


def inclusive_overlap_days(start: date, end: date, period_start: date, period_end: date) -> int:
    """Number of days in [start, end] that fall inside [period_start, period_end]."""
    lo = max(start, period_start)
    hi = min(end, period_end)
    if hi < lo:
        return 0
    return (hi - lo).days + 1
