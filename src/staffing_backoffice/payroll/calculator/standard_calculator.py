from __future__ import annotations

from decimal import Decimal

from ...attendance.model import AttendanceCounts
from ...common.money import money, to_decimal
from ...core.constants import (
    HOLIDAY_RATE_MULTIPLIER,
    OVERTIME_RATE_MULTIPLIER,
    STANDARD_WORK_HOURS,
    WEEKEND_RATE_MULTIPLIER,
)
from ...core.enums import FrequencyMode
from ...core.exceptions import InvalidInputError
from ..model import CompensationResult
from .base import CompensationCalculator


class StandardCompensationCalculator(CompensationCalculator):
    """Standard rule.

    - daily base: monthly amount / working days, or hourly rate x 8
    - weekend and holiday days at 2x the daily base
    - overtime hours at 1.5x the hourly rate (daily base / 8 for monthly pay)

    Components are rounded to cents individually; total is their sum.
    """

    def __init__(
        self,
        *,
        weekend_multiplier: Decimal = WEEKEND_RATE_MULTIPLIER,
        holiday_multiplier: Decimal = HOLIDAY_RATE_MULTIPLIER,
        overtime_multiplier: Decimal = OVERTIME_RATE_MULTIPLIER,
        standard_hours: Decimal = STANDARD_WORK_HOURS,
    ):
        self._weekend_multiplier = weekend_multiplier
        self._holiday_multiplier = holiday_multiplier
        self._overtime_multiplier = overtime_multiplier
        self._standard_hours = standard_hours

    def compute(
        self,
        base_amount: Decimal,
        mode: FrequencyMode,
        attendance: AttendanceCounts,
        working_days_in_month: int,
    ) -> CompensationResult:
        base_amount = to_decimal(base_amount)
        if working_days_in_month is None or working_days_in_month <= 0:
            raise InvalidInputError("working_days_in_month must be greater than 0")
        if base_amount < 0:
            raise InvalidInputError("base amount cannot be negative")
        negative = attendance.negative_fields()
        if negative:
            raise InvalidInputError(f"attendance counts cannot be negative: {', '.join(negative)}")

        mode = FrequencyMode(mode)
        if mode == FrequencyMode.MONTHLY:
            base_daily = base_amount / Decimal(working_days_in_month)
            hourly_rate = base_daily / self._standard_hours
        else:
            base_daily = base_amount * self._standard_hours
            hourly_rate = base_amount

        regular = money(base_daily * attendance.regular_days_worked)
        weekend = money(base_daily * attendance.weekend_days_worked * self._weekend_multiplier)
        holiday = money(base_daily * attendance.holiday_days_worked * self._holiday_multiplier)
        overtime = money(hourly_rate * attendance.overtime_hours * self._overtime_multiplier)

        return CompensationResult(
            regular=regular,
            weekend=weekend,
            holiday=holiday,
            overtime=overtime,
            total=regular + weekend + holiday + overtime,
        )
