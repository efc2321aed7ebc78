from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..common.money import ZERO, money_str


@dataclass(frozen=True)
class CompensationResult:
    """Pay components of one month; total is the exact sum of the other four."""

    regular: Decimal = ZERO
    weekend: Decimal = ZERO
    holiday: Decimal = ZERO
    overtime: Decimal = ZERO
    total: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "regular": money_str(self.regular),
            "weekend": money_str(self.weekend),
            "holiday": money_str(self.holiday),
            "overtime": money_str(self.overtime),
            "total": money_str(self.total),
        }


@dataclass(frozen=True)
class JobCompensation:
    """Salary and billing of one job for one month, with commission and profit."""

    salary: CompensationResult
    billing: CompensationResult
    commission: Decimal
    net_profit: Decimal
