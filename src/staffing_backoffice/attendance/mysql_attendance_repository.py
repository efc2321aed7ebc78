from __future__ import annotations

from datetime import time
from decimal import Decimal
from typing import Optional, Sequence

from ..common.money import to_decimal
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import clock_from_row, db_cursor, fetchall, fetchone
from .model import AttendanceDay, MonthlyAttendance
from .repository import AttendanceRepository

_DAY_COLUMNS = "id, job_id, year, month, day, status, time_in, time_out, hours_worked, notes"


def _row_to_day(r: dict) -> AttendanceDay:
    return AttendanceDay(
        attendance_id=int(r["id"]),
        job_id=int(r["job_id"]),
        year=int(r["year"]),
        month=int(r["month"]),
        day=int(r["day"]),
        status=AttendanceStatus(r["status"]),
        time_in=clock_from_row(r.get("time_in")),
        time_out=clock_from_row(r.get("time_out")),
        hours_worked=to_decimal(r.get("hours_worked")),
        notes=r.get("notes") or "",
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_DAY_COLUMNS} FROM job_attendance WHERE id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_day(r) if r else None

    def get_day(self, *, job_id: int, year: int, month: int, day: int) -> Optional[AttendanceDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DAY_COLUMNS}
                FROM job_attendance
                WHERE job_id=%s AND year=%s AND month=%s AND day=%s
                """,
                (int(job_id), int(year), int(month), int(day)),
            )
            r = fetchone(cur)
            return _row_to_day(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO job_attendance(job_id, year, month, day, status, time_in, time_out, hours_worked, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    time_in=VALUES(time_in),
                    time_out=VALUES(time_out),
                    hours_worked=VALUES(hours_worked),
                    notes=VALUES(notes)
                """,
                (int(job_id), int(year), int(month), int(day), status.value, time_in, time_out, hours_worked, notes),
            )

            # If it was an update, lastrowid can be 0; fetch the id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT id FROM job_attendance WHERE job_id=%s AND year=%s AND month=%s AND day=%s",
                (int(job_id), int(year), int(month), int(day)),
            )
            r = fetchone(cur)
            return int(r["id"]) if r else 0

    def list_days(self, *, job_id: int, year: int, month: int) -> Sequence[AttendanceDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DAY_COLUMNS}
                FROM job_attendance
                WHERE job_id=%s AND year=%s AND month=%s
                ORDER BY day ASC
                """,
                (int(job_id), int(year), int(month)),
            )
            return [_row_to_day(r) for r in fetchall(cur)]

    def get_monthly(self, *, job_id: int, year: int, month: int) -> Optional[MonthlyAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT job_id, year, month, regular_days_worked, weekend_days_worked,
                       holiday_days_worked, leaves_taken, overtime_hours, notes
                FROM job_attendance_monthly
                WHERE job_id=%s AND year=%s AND month=%s
                """,
                (int(job_id), int(year), int(month)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return MonthlyAttendance(
                job_id=int(r["job_id"]),
                year=int(r["year"]),
                month=int(r["month"]),
                regular_days_worked=to_decimal(r["regular_days_worked"]),
                weekend_days_worked=to_decimal(r["weekend_days_worked"]),
                holiday_days_worked=to_decimal(r["holiday_days_worked"]),
                leaves_taken=to_decimal(r["leaves_taken"]),
                overtime_hours=to_decimal(r["overtime_hours"]),
                notes=r.get("notes") or "",
            )

    def upsert_monthly(self, record: MonthlyAttendance) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO job_attendance_monthly
                    (job_id, year, month, regular_days_worked, weekend_days_worked,
                     holiday_days_worked, leaves_taken, overtime_hours, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    regular_days_worked=VALUES(regular_days_worked),
                    weekend_days_worked=VALUES(weekend_days_worked),
                    holiday_days_worked=VALUES(holiday_days_worked),
                    leaves_taken=VALUES(leaves_taken),
                    overtime_hours=VALUES(overtime_hours),
                    notes=VALUES(notes)
                """,
                (
                    record.job_id,
                    record.year,
                    record.month,
                    record.regular_days_worked,
                    record.weekend_days_worked,
                    record.holiday_days_worked,
                    record.leaves_taken,
                    record.overtime_hours,
                    record.notes,
                ),
            )
