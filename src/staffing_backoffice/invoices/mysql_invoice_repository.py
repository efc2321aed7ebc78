from __future__ import annotations

import logging
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..attendance.model import AttendanceCounts
from ..common.money import money, to_decimal
from ..core.exceptions import DuplicateInvoiceError, InvalidInputError, NotFoundError, PersistenceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..payroll.model import CompensationResult
from .model import Invoice, InvoiceLine, PersistedInvoiceRef, scope_from_record
from .repository import InvoiceRepository

logger = logging.getLogger(__name__)

_INSERT_INVOICE = """
    INSERT INTO invoices(
        scope_kind, scope_key, invoice_type, period_year, period_month, amount,
        total_billing_amount, total_salary_amount, total_commission, net_profit, storage_locator
    )
    VALUES(%s,%s,'monthly',%s,%s,%s,%s,%s,%s,%s,'')
"""

_INSERT_LINE = """
    INSERT INTO invoice_jobs(
        invoice_id, line_no, job_id, candidate_name, client_company, present_days, total_hours,
        regular_days, weekend_days, holiday_days, leaves_taken, overtime_hours, working_days,
        regular_amount, weekend_amount, holiday_amount, overtime_amount, billed_amount,
        regular_salary, weekend_salary, holiday_salary, overtime_salary, salary_amount,
        commission, net_profit
    )
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""


def _line_params(invoice_id: int, line_no: int, line: InvoiceLine) -> tuple:
    a = line.attendance
    return (
        invoice_id,
        line_no,
        line.job_id,
        line.candidate_name,
        line.client_company,
        line.present_days,
        line.total_hours,
        a.regular_days_worked,
        a.weekend_days_worked,
        a.holiday_days_worked,
        a.leaves_taken,
        a.overtime_hours,
        line.working_days,
        line.billing.regular,
        line.billing.weekend,
        line.billing.holiday,
        line.billing.overtime,
        line.billing.total,
        line.salary.regular,
        line.salary.weekend,
        line.salary.holiday,
        line.salary.overtime,
        line.salary.total,
        line.commission,
        line.net_profit,
    )


def _row_to_line(r: dict) -> InvoiceLine:
    return InvoiceLine(
        job_id=int(r["job_id"]),
        candidate_name=r.get("candidate_name") or "",
        client_company=r.get("client_company") or "",
        present_days=to_decimal(r["present_days"]),
        total_hours=to_decimal(r["total_hours"]),
        attendance=AttendanceCounts(
            regular_days_worked=to_decimal(r["regular_days"]),
            weekend_days_worked=to_decimal(r["weekend_days"]),
            holiday_days_worked=to_decimal(r["holiday_days"]),
            leaves_taken=to_decimal(r["leaves_taken"]),
            overtime_hours=to_decimal(r["overtime_hours"]),
        ),
        working_days=int(r["working_days"]),
        billing=CompensationResult(
            regular=money(r["regular_amount"]),
            weekend=money(r["weekend_amount"]),
            holiday=money(r["holiday_amount"]),
            overtime=money(r["overtime_amount"]),
            total=money(r["billed_amount"]),
        ),
        salary=CompensationResult(
            regular=money(r["regular_salary"]),
            weekend=money(r["weekend_salary"]),
            holiday=money(r["holiday_salary"]),
            overtime=money(r["overtime_salary"]),
            total=money(r["salary_amount"]),
        ),
        commission=money(r["commission"]),
        net_profit=money(r["net_profit"]),
    )


class MySQLInvoiceRepository(InvoiceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def commit(self, invoice: Invoice) -> PersistedInvoiceRef:
        if not invoice.lines:
            raise InvalidInputError("Cannot commit an invoice without line items")

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    _INSERT_INVOICE,
                    (
                        invoice.scope.kind.value,
                        invoice.scope.key,
                        invoice.year,
                        invoice.month,
                        invoice.total_billing_amount,
                        invoice.total_billing_amount,
                        invoice.total_salary_amount,
                        invoice.total_commission,
                        invoice.net_profit,
                    ),
                )
                invoice_id = int(cur.lastrowid)
                for line_no, line in enumerate(invoice.lines, start=1):
                    cur.execute(_INSERT_LINE, _line_params(invoice_id, line_no, line))
        except mysql.connector.IntegrityError as exc:
            if exc.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicateInvoiceError(
                    f"An invoice for {invoice.scope.label} in {invoice.month}/{invoice.year} already exists"
                ) from exc
            raise PersistenceError(f"Invoice could not be saved: {exc}") from exc
        except mysql.connector.Error as exc:
            raise PersistenceError(f"Invoice could not be saved: {exc}") from exc

        return PersistedInvoiceRef(invoice_id=invoice_id, line_count=len(invoice.lines))

    def attach_storage(self, invoice_id: int, locator: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT id FROM invoices WHERE id=%s", (int(invoice_id),))
                if not fetchone(cur):
                    raise NotFoundError(f"Invoice {invoice_id} not found")
                cur.execute("UPDATE invoices SET storage_locator=%s WHERE id=%s", (locator, int(invoice_id)))
        except mysql.connector.Error as exc:
            raise PersistenceError(f"Storage locator for invoice {invoice_id} not saved: {exc}") from exc

    def get(self, invoice_id: int) -> Optional[Invoice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, scope_kind, scope_key, period_year, period_month,
                       total_billing_amount, total_salary_amount, total_commission, net_profit,
                       storage_locator, created_at
                FROM invoices
                WHERE id=%s
                """,
                (int(invoice_id),),
            )
            head = fetchone(cur)
            if not head:
                return None

            cur.execute("SELECT * FROM invoice_jobs WHERE invoice_id=%s ORDER BY line_no ASC", (int(invoice_id),))
            lines = tuple(_row_to_line(r) for r in fetchall(cur))

        return Invoice(
            scope=scope_from_record(head["scope_kind"], head["scope_key"]),
            year=int(head["period_year"]),
            month=int(head["period_month"]),
            lines=lines,
            total_billing_amount=money(head["total_billing_amount"]),
            total_salary_amount=money(head["total_salary_amount"]),
            total_commission=money(head["total_commission"]),
            net_profit=money(head["net_profit"]),
            invoice_id=int(head["id"]),
            storage_locator=head.get("storage_locator") or "",
            created_at=head.get("created_at"),
        )

    def list_invoices(
        self, *, year: Optional[int] = None, month: Optional[int] = None, limit: int = 200
    ) -> Sequence[dict]:
        clauses = ["1=1"]
        params: list[object] = []
        if year is not None:
            clauses.append("i.period_year=%s")
            params.append(int(year))
        if month is not None:
            clauses.append("i.period_month=%s")
            params.append(int(month))
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT i.id, i.scope_kind, i.scope_key, i.period_year, i.period_month,
                       i.total_billing_amount, i.total_salary_amount, i.total_commission, i.net_profit,
                       i.storage_locator, i.created_at, COUNT(l.id) AS line_count
                FROM invoices i
                LEFT JOIN invoice_jobs l ON l.invoice_id = i.id
                WHERE {" AND ".join(clauses)}
                GROUP BY i.id
                ORDER BY i.id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        return [
            {
                "invoice_id": int(r["id"]),
                "scope_kind": r["scope_kind"],
                "scope_key": r["scope_key"],
                "year": int(r["period_year"]),
                "month": int(r["period_month"]),
                "total_billing_amount": f"{money(r['total_billing_amount']):.2f}",
                "total_salary_amount": f"{money(r['total_salary_amount']):.2f}",
                "total_commission": f"{money(r['total_commission']):.2f}",
                "net_profit": f"{money(r['net_profit']):.2f}",
                "storage_locator": r.get("storage_locator") or "",
                "line_count": int(r.get("line_count") or 0),
                "created_at": r["created_at"].isoformat() if r.get("created_at") else None,
            }
            for r in rows
        ]

    def list_lines_for_job(self, job_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT l.invoice_id, i.period_year, i.period_month,
                       l.billed_amount, l.salary_amount, l.commission, l.net_profit
                FROM invoice_jobs l
                JOIN invoices i ON i.id = l.invoice_id
                WHERE l.job_id=%s
                ORDER BY i.period_year DESC, i.period_month DESC, l.invoice_id DESC
                """,
                (int(job_id),),
            )
            return [
                {
                    "invoice_id": int(r["invoice_id"]),
                    "year": int(r["period_year"]),
                    "month": int(r["period_month"]),
                    "billed_amount": money(r["billed_amount"]),
                    "salary_amount": money(r["salary_amount"]),
                    "commission": money(r["commission"]),
                    "net_profit": money(r["net_profit"]),
                }
                for r in fetchall(cur)
            ]
