from __future__ import annotations

import calendar
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.constants import MAX_YEAR, MIN_ATTENDANCE_YEAR
from ..core.exceptions import ValidationError
from .datetime_utils import now_local


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None


def require_decimal(value: Any, field_name: str, *, default: Optional[Decimal] = None) -> Decimal:
    if value is None or value == "":
        if default is not None:
            return default
        raise ValidationError(f"{field_name} is required")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return number


def require_non_negative(value: Any, field_name: str, *, default: Optional[Decimal] = None) -> Decimal:
    number = require_decimal(value, field_name, default=default)
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return number


def require_period(year: Any, month: Any) -> tuple[int, int]:
    """Validate a billing period and return it as ints."""
    year = require_int(year, "year")
    month = require_int(month, "month")
    if month < 1 or month > 12:
        raise ValidationError("Month must be between 1 and 12")
    if year < MIN_ATTENDANCE_YEAR or year > MAX_YEAR:
        raise ValidationError(f"Year must be between {MIN_ATTENDANCE_YEAR} and {MAX_YEAR}")
    return year, month


def require_attendance_date(year: Any, month: Any, day: Any) -> tuple[int, int, int]:
    """Validate the calendar date of one attendance day.

    Attendance cannot be recorded further than one year ahead.
    """

    year, month = require_period(year, month)
    day = require_int(day, "day")

    last_day = calendar.monthrange(year, month)[1]
    if day < 1 or day > last_day:
        raise ValidationError(f"Day must be between 1 and {last_day} for month {month}")

    max_year = now_local().year + 1
    if year > max_year:
        raise ValidationError(f"Year must be between {MIN_ATTENDANCE_YEAR} and {max_year}")
    return year, month, day
