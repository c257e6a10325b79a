from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Tuple

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse a YYYY-MM-DD string (or a full ISO timestamp) into a date.

    Time-of-day is dropped: attendance is tracked at day granularity.
    """
    v = (value or "").strip()
    if not v:
        raise ValidationError("Date is required")
    try:
        return datetime.strptime(v[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def month_bounds(year_month: str) -> Tuple[date, date]:
    """First and last calendar day of a ``YYYY-MM`` month, both inclusive."""
    v = (year_month or "").strip()
    try:
        parsed = datetime.strptime(v, "%Y-%m")
    except ValueError:
        raise ValidationError(f"Invalid month: {year_month!r} (expected YYYY-MM)")
    last_day = calendar.monthrange(parsed.year, parsed.month)[1]
    return date(parsed.year, parsed.month, 1), date(parsed.year, parsed.month, last_day)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
