from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from ..core.constants import MONEY_PLACES

ZERO = Decimal("0.00")


def to_decimal(value: Any) -> Decimal:
    """Convert driver/JSON values (float, str, Decimal, None) to Decimal."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(value: Any) -> Decimal:
    """Quantize to the monetary precision (2 places, half-up)."""
    return to_decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def money_str(value: Decimal) -> str:
    return f"{money(value):.2f}"
