from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_clock
from ..common.validators import require_attendance_date, require_int, require_non_negative, require_period
from ..core.constants import STANDARD_WORK_HOURS
from ..core.enums import AttendanceStatus
from ..core.exceptions import MissingAttendanceError, NotFoundError, ValidationError
from ..jobs.repository import JobRepository
from ..workdays.service import WorkingCalendarService
from .model import AttendanceCounts, AttendanceDay, AttendanceMonthSummary, MonthlyAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_WORKED_STATUSES = {AttendanceStatus.PRESENT, AttendanceStatus.WEEKEND, AttendanceStatus.HOLIDAY}


def fold_days(days: Sequence[AttendanceDay]) -> tuple[AttendanceCounts, Decimal, Decimal]:
    """Fold day rows into (counts, present_days, total_hours).

    weekend/holiday rows count as days worked only when hours were logged;
    overtime is the part of each worked day beyond the standard day.
    """

    regular = weekend = holiday = leaves = overtime = Decimal("0")
    present = Decimal("0")
    total_hours = Decimal("0")

    for d in days:
        hours = d.hours_worked
        total_hours += hours

        if d.status == AttendanceStatus.PRESENT:
            regular += 1
            present += 1
        elif d.status == AttendanceStatus.HALF_DAY:
            regular += Decimal("0.5")
        elif d.status == AttendanceStatus.WEEKEND and hours > 0:
            weekend += 1
        elif d.status == AttendanceStatus.HOLIDAY and hours > 0:
            holiday += 1
        elif d.status == AttendanceStatus.LEAVE:
            leaves += 1

        if d.status in _WORKED_STATUSES and hours > STANDARD_WORK_HOURS:
            overtime += hours - STANDARD_WORK_HOURS

    counts = AttendanceCounts(
        regular_days_worked=regular,
        weekend_days_worked=weekend,
        holiday_days_worked=holiday,
        leaves_taken=leaves,
        overtime_hours=overtime,
    )
    return counts, present, total_hours


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        jobs: JobRepository,
        calendar: WorkingCalendarService,
    ):
        self._attendance = attendance
        self._jobs = jobs
        self._calendar = calendar

    def _require_job(self, job_id: Any) -> int:
        job_id = require_int(job_id, "job_id")
        if not self._jobs.get_by_id(job_id):
            raise NotFoundError("Job not found")
        return job_id

    def record_day(
        self,
        *,
        job_id,
        year,
        month,
        day,
        status: Optional[str] = None,
        time_in: Optional[str] = None,
        time_out: Optional[str] = None,
        hours_worked=None,
        notes: Optional[str] = None,
    ) -> AttendanceDay:
        year, month, day = require_attendance_date(year, month, day)
        job_id = self._require_job(job_id)

        existing = self._attendance.get_day(job_id=job_id, year=year, month=month, day=day)
        if status:
            try:
                status_enum = AttendanceStatus(status)
            except ValueError:
                valid = ", ".join(s.value for s in AttendanceStatus)
                raise ValidationError(f"Invalid status. Must be one of: {valid}") from None
        else:
            status_enum = existing.status if existing else AttendanceStatus.PRESENT

        try:
            clock_in = parse_clock(time_in)
            clock_out = parse_clock(time_out)
        except ValueError:
            raise ValidationError("time_in/time_out must be HH:MM or HH:MM:SS") from None

        hours = require_non_negative(hours_worked, "hours_worked", default=Decimal("0"))

        attendance_id = self._attendance.upsert_day(
            job_id=job_id,
            year=year,
            month=month,
            day=day,
            status=status_enum,
            time_in=clock_in,
            time_out=clock_out,
            hours_worked=hours,
            notes=(notes or "").strip(),
        )
        logger.debug("Attendance %s job=%s %s-%s-%s %s", "updated" if existing else "created", job_id, year, month, day, status_enum.value)
        return AttendanceDay(
            attendance_id=attendance_id,
            job_id=job_id,
            year=year,
            month=month,
            day=day,
            status=status_enum,
            time_in=clock_in,
            time_out=clock_out,
            hours_worked=hours,
            notes=(notes or "").strip(),
        )

    def get_record(self, attendance_id) -> AttendanceDay:
        record = self._attendance.get_by_id(require_int(attendance_id, "attendance_id"))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def record_month(
        self,
        *,
        job_id,
        year,
        month,
        regular_days_worked=None,
        weekend_days_worked=None,
        holiday_days_worked=None,
        leaves_taken=None,
        overtime_hours=None,
        notes: Optional[str] = None,
    ) -> MonthlyAttendance:
        year, month = require_period(year, month)
        job_id = self._require_job(job_id)
        zero = Decimal("0")

        record = MonthlyAttendance(
            job_id=job_id,
            year=year,
            month=month,
            regular_days_worked=require_non_negative(regular_days_worked, "regular_days_worked", default=zero),
            weekend_days_worked=require_non_negative(weekend_days_worked, "weekend_days_worked", default=zero),
            holiday_days_worked=require_non_negative(holiday_days_worked, "holiday_days_worked", default=zero),
            leaves_taken=require_non_negative(leaves_taken, "leaves_taken", default=zero),
            overtime_hours=require_non_negative(overtime_hours, "overtime_hours", default=zero),
            notes=(notes or "").strip(),
        )

        working_days = self._calendar.require_working_days(year=year, month=month)
        if record.regular_days_worked > working_days:
            raise ValidationError("Regular days worked cannot exceed total working days in the month")

        self._attendance.upsert_monthly(record)
        logger.debug("Monthly attendance recorded job=%s %s-%s", job_id, year, month)
        return record

    def month_view(self, *, job_id, year, month) -> dict:
        year, month = require_period(year, month)
        job_id = require_int(job_id, "job_id")
        days = self._attendance.list_days(job_id=job_id, year=year, month=month)

        def count(status: AttendanceStatus) -> int:
            return sum(1 for d in days if d.status == status)

        summary = {
            "total_days": len(days),
            "present_days": count(AttendanceStatus.PRESENT),
            "absent_days": count(AttendanceStatus.ABSENT),
            "half_days": count(AttendanceStatus.HALF_DAY),
            "leaves": count(AttendanceStatus.LEAVE),
            "holidays": count(AttendanceStatus.HOLIDAY),
            "weekends": count(AttendanceStatus.WEEKEND),
            "total_hours": sum((d.hours_worked for d in days), Decimal("0")),
        }
        return {"job_id": job_id, "year": year, "month": month, "summary": summary, "attendance": list(days)}

    def summarize(
        self, *, job_id: int, year: int, month: int, working_days: Optional[int] = None
    ) -> Optional[AttendanceMonthSummary]:
        """Build the month summary of a job, or None when nothing was recorded.

        The monthly-aggregate row wins over day rows when both exist.
        """

        monthly = self._attendance.get_monthly(job_id=job_id, year=year, month=month)
        if monthly:
            counts = AttendanceCounts(
                regular_days_worked=monthly.regular_days_worked,
                weekend_days_worked=monthly.weekend_days_worked,
                holiday_days_worked=monthly.holiday_days_worked,
                leaves_taken=monthly.leaves_taken,
                overtime_hours=monthly.overtime_hours,
            )
            days_worked = counts.regular_days_worked + counts.weekend_days_worked + counts.holiday_days_worked
            present = counts.regular_days_worked
            total_hours = days_worked * STANDARD_WORK_HOURS + counts.overtime_hours
            source = "monthly"
        else:
            days = self._attendance.list_days(job_id=job_id, year=year, month=month)
            if not days:
                return None
            counts, present, total_hours = fold_days(days)
            source = "daily"

        if working_days is None:
            working_days = self._calendar.require_working_days(year=year, month=month)
        return AttendanceMonthSummary(
            job_id=job_id,
            year=year,
            month=month,
            counts=counts,
            total_working_days=working_days,
            present_days=present,
            total_hours=total_hours,
            source=source,
        )

    def get_summary(self, *, job_id, year, month) -> AttendanceMonthSummary:
        year, month = require_period(year, month)
        job_id = self._require_job(job_id)
        summary = self.summarize(job_id=job_id, year=year, month=month)
        if summary is None:
            raise MissingAttendanceError(job_id)
        return summary
