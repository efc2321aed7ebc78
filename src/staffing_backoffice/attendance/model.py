from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import InvalidInputError


@dataclass(frozen=True)
class AttendanceDay:
    """Domain entity: one observation of a job on one calendar day."""

    attendance_id: int
    job_id: int
    year: int
    month: int
    day: int
    status: AttendanceStatus
    time_in: Optional[time] = None
    time_out: Optional[time] = None
    hours_worked: Decimal = Decimal("0")
    notes: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "job_id": self.job_id,
            "date": f"{self.year:04d}-{self.month:02d}-{self.day:02d}",
            "status": self.status.value,
            "time_in": self.time_in.strftime("%H:%M:%S") if self.time_in else None,
            "time_out": self.time_out.strftime("%H:%M:%S") if self.time_out else None,
            "hours_worked": str(self.hours_worked),
            "notes": self.notes,
        }


@dataclass(frozen=True)
class MonthlyAttendance:
    """Domain entity: the monthly-aggregate attendance variant of a job."""

    job_id: int
    year: int
    month: int
    regular_days_worked: Decimal
    weekend_days_worked: Decimal
    holiday_days_worked: Decimal
    leaves_taken: Decimal
    overtime_hours: Decimal
    notes: str = ""

    def to_dict(self) -> dict:
        return {
            "job_id": self.job_id,
            "year": self.year,
            "month": self.month,
            "regular_days_worked": str(self.regular_days_worked),
            "weekend_days_worked": str(self.weekend_days_worked),
            "holiday_days_worked": str(self.holiday_days_worked),
            "leaves_taken": str(self.leaves_taken),
            "overtime_hours": str(self.overtime_hours),
            "notes": self.notes,
        }


@dataclass(frozen=True)
class AttendanceCounts:
    """The five counts the compensation calculator consumes."""

    regular_days_worked: Decimal = Decimal("0")
    weekend_days_worked: Decimal = Decimal("0")
    holiday_days_worked: Decimal = Decimal("0")
    leaves_taken: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")

    def negative_fields(self) -> list[str]:
        return [
            name
            for name in (
                "regular_days_worked",
                "weekend_days_worked",
                "holiday_days_worked",
                "leaves_taken",
                "overtime_hours",
            )
            if getattr(self, name) < 0
        ]


@dataclass(frozen=True)
class AttendanceMonthSummary:
    """Read-model: attendance of one job over one (year, month), never stored."""

    job_id: int
    year: int
    month: int
    counts: AttendanceCounts
    total_working_days: int
    present_days: Decimal
    total_hours: Decimal
    source: str = "daily"

    def __post_init__(self):
        if self.counts.regular_days_worked > self.total_working_days:
            raise InvalidInputError(
                f"Regular days worked ({self.counts.regular_days_worked}) exceed the "
                f"{self.total_working_days} working days of {self.month}/{self.year} for job {self.job_id}"
            )

    def to_dict(self) -> dict:
        return {
            "job_id": self.job_id,
            "year": self.year,
            "month": self.month,
            "source": self.source,
            "total_working_days": self.total_working_days,
            "present_days": str(self.present_days),
            "total_hours": str(self.total_hours),
            "regular_days_worked": str(self.counts.regular_days_worked),
            "weekend_days_worked": str(self.counts.weekend_days_worked),
            "holiday_days_worked": str(self.counts.holiday_days_worked),
            "leaves_taken": str(self.counts.leaves_taken),
            "overtime_hours": str(self.counts.overtime_hours),
        }
