from __future__ import annotations

import logging

from ..common.datetime_utils import days_in_month
from ..common.validators import require_int, require_period
from ..core.exceptions import NotFoundError, ValidationError
from .repository import WorkingCalendar

logger = logging.getLogger(__name__)


class WorkingCalendarService:
    def __init__(self, calendar: WorkingCalendar):
        self._calendar = calendar

    def set_working_days(self, *, year, month, working_days) -> int:
        year, month = require_period(year, month)
        working_days = require_int(working_days, "working_days")

        max_days = days_in_month(year, month)
        if working_days < 1 or working_days > max_days:
            raise ValidationError(f"working_days must be between 1 and {max_days} for {month}/{year}")

        self._calendar.set_working_days(year=year, month=month, working_days=working_days)
        logger.info("Working days for %s/%s set to %s", month, year, working_days)
        return working_days

    def require_working_days(self, *, year: int, month: int) -> int:
        days = self._calendar.working_days(year=year, month=month)
        if not days or days <= 0:
            raise NotFoundError(f"Monthly working days not set for {month}/{year}")
        return int(days)
