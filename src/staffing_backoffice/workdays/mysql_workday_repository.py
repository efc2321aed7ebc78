from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import WorkingCalendar


class MySQLWorkingCalendar(WorkingCalendar):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def working_days(self, *, year: int, month: int) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT working_days FROM monthly_workdays WHERE year=%s AND month=%s",
                (int(year), int(month)),
            )
            r = fetchone(cur)
            return int(r["working_days"]) if r else None

    def set_working_days(self, *, year: int, month: int, working_days: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO monthly_workdays(year, month, working_days)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE working_days=VALUES(working_days)
                """,
                (int(year), int(month), int(working_days)),
            )
