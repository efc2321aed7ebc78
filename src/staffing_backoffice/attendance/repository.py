from __future__ import annotations

from datetime import time
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceDay, MonthlyAttendance


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceDay]:
        raise NotImplementedError

    def get_day(self, *, job_id: int, year: int, month: int, day: int) -> Optional[AttendanceDay]:
        raise NotImplementedError

    def upsert_day(
        self,
        *,
        job_id: int,
        year: int,
        month: int,
        day: int,
        status: AttendanceStatus,
        time_in: Optional[time],
        time_out: Optional[time],
        hours_worked: Decimal,
        notes: str,
    ) -> int:
        """Create or update the row keyed by (job, year, month, day).

        Returns attendance_id.
        """

        raise NotImplementedError

    def list_days(self, *, job_id: int, year: int, month: int) -> Sequence[AttendanceDay]:
        """Day rows of a job in a month, ordered by day."""

        raise NotImplementedError

    def get_monthly(self, *, job_id: int, year: int, month: int) -> Optional[MonthlyAttendance]:
        raise NotImplementedError

    def upsert_monthly(self, record: MonthlyAttendance) -> None:
        raise NotImplementedError
