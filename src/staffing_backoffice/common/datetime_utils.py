from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Optional


def parse_clock(value: Optional[str]) -> Optional[time]:
    """Parse HH:MM or HH:MM:SS wall-clock text; empty means not recorded."""
    if value is None or not str(value).strip():
        return None
    text = str(value).strip()
    fmt = "%H:%M:%S" if text.count(":") == 2 else "%H:%M"
    return datetime.strptime(text, fmt).time()


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
