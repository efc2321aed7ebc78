from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Sequence

from ..common.money import to_decimal
from ..core.constants import DEFAULT_COMMISSION_PERCENTAGE
from ..core.enums import PaymentFrequency
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Job
from .repository import JobRepository

_SELECT_JOB = """
    SELECT
        j.id, j.candidate_id, COALESCE(c.name, '') AS candidate_name,
        j.title, j.client_company, j.partner_company,
        j.candidate_salary, j.client_billing_amount, j.hourly_rate, j.billing_hourly_rate,
        j.payment_frequency, j.payment_currency, j.commission_percentage,
        j.start_date, j.end_date, j.status
    FROM jobs j
    LEFT JOIN candidates c ON c.id = j.candidate_id
"""


def _optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else to_decimal(value)


def _row_to_job(r: dict) -> Job:
    commission = r.get("commission_percentage")
    return Job(
        id=int(r["id"]),
        candidate_id=int(r["candidate_id"]),
        candidate_name=r.get("candidate_name") or "",
        client_company=r.get("client_company") or "",
        partner_company=r.get("partner_company"),
        payment_frequency=PaymentFrequency(r.get("payment_frequency") or PaymentFrequency.MONTHLY.value),
        candidate_salary=_optional_decimal(r.get("candidate_salary")),
        client_billing_amount=_optional_decimal(r.get("client_billing_amount")),
        hourly_rate=_optional_decimal(r.get("hourly_rate")),
        billing_hourly_rate=_optional_decimal(r.get("billing_hourly_rate")),
        commission_percentage=to_decimal(commission) if commission is not None else DEFAULT_COMMISSION_PERCENTAGE,
        title=r.get("title"),
        start_date=r.get("start_date"),
        end_date=r.get("end_date"),
        status=r.get("status") or "active",
        payment_currency=r.get("payment_currency") or "USD",
    )


class MySQLJobRepository(JobRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, job_id: int) -> Optional[Job]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_JOB + " WHERE j.id=%s", (int(job_id),))
            r = fetchone(cur)
            return _row_to_job(r) if r else None

    def list_by_ids(self, job_ids: Sequence[int]) -> Sequence[Job]:
        ids = sorted({int(i) for i in job_ids})
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_JOB + f" WHERE j.id IN ({placeholders}) ORDER BY j.id ASC", tuple(ids))
            return [_row_to_job(r) for r in fetchall(cur)]

    def list_for_partner(self, partner_id: str) -> Sequence[Job]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_JOB + " WHERE j.partner_company=%s ORDER BY j.id ASC", (str(partner_id),))
            return [_row_to_job(r) for r in fetchall(cur)]

    def list_with_attendance(self, *, year: int, month: int) -> Sequence[Job]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_JOB
                + """
                WHERE EXISTS (
                    SELECT 1 FROM job_attendance a
                    WHERE a.job_id = j.id AND a.year=%s AND a.month=%s
                ) OR EXISTS (
                    SELECT 1 FROM job_attendance_monthly m
                    WHERE m.job_id = j.id AND m.year=%s AND m.month=%s
                )
                ORDER BY j.id ASC
                """,
                (int(year), int(month), int(year), int(month)),
            )
            return [_row_to_job(r) for r in fetchall(cur)]

    def list_active(self) -> Sequence[Job]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_JOB + " WHERE j.status='active' ORDER BY j.id ASC")
            return [_row_to_job(r) for r in fetchall(cur)]
