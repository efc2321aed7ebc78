from __future__ import annotations

from dataclasses import replace
from datetime import time
from decimal import Decimal
from typing import Optional, Sequence

import pytest
from werkzeug.security import generate_password_hash

from staffing_backoffice.attendance.model import AttendanceDay, MonthlyAttendance
from staffing_backoffice.container import assemble
from staffing_backoffice.core.enums import AttendanceStatus, PaymentFrequency, Role
from staffing_backoffice.core.exceptions import NotFoundError, PersistenceError, RenderingOrStorageError
from staffing_backoffice.invoices.model import Invoice, PersistedInvoiceRef
from staffing_backoffice.jobs.model import Job
from staffing_backoffice.users.model import User
from staffing_backoffice.users.service import TokenService


def make_job(job_id: int, **overrides) -> Job:
    fields = dict(
        id=job_id,
        candidate_id=100 + job_id,
        candidate_name=f"Candidate {job_id}",
        client_company="Acme Corp",
        partner_company="P1",
        payment_frequency=PaymentFrequency.MONTHLY,
        candidate_salary=Decimal("2200"),
        client_billing_amount=Decimal("3300"),
        commission_percentage=Decimal("10"),
    )
    fields.update(overrides)
    return Job(**fields)


class InMemoryJobs:
    def __init__(self, jobs: Sequence[Job] = (), attendance: Optional["InMemoryAttendance"] = None):
        self._jobs = {j.id: j for j in jobs}
        self._attendance = attendance

    def add(self, job: Job) -> Job:
        self._jobs[job.id] = job
        return job

    def get_by_id(self, job_id: int) -> Optional[Job]:
        return self._jobs.get(job_id)

    def list_by_ids(self, job_ids):
        return [self._jobs[i] for i in sorted(set(job_ids)) if i in self._jobs]

    def list_for_partner(self, partner_id: str):
        return [j for _, j in sorted(self._jobs.items()) if j.partner_company == partner_id]

    def list_with_attendance(self, *, year: int, month: int):
        return [j for _, j in sorted(self._jobs.items()) if self._attendance.has_any(j.id, year, month)]

    def list_active(self):
        return [j for _, j in sorted(self._jobs.items()) if j.status == "active"]


class InMemoryAttendance:
    def __init__(self):
        self._days: dict[tuple[int, int, int, int], AttendanceDay] = {}
        self._monthly: dict[tuple[int, int, int], MonthlyAttendance] = {}
        self._id = 0

    def has_any(self, job_id: int, year: int, month: int) -> bool:
        if (job_id, year, month) in self._monthly:
            return True
        return any(k[:3] == (job_id, year, month) for k in self._days)

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceDay]:
        return next((d for d in self._days.values() if d.attendance_id == attendance_id), None)

    def get_day(self, *, job_id, year, month, day):
        return self._days.get((job_id, year, month, day))

    def upsert_day(self, *, job_id, year, month, day, status, time_in, time_out, hours_worked, notes) -> int:
        existing = self._days.get((job_id, year, month, day))
        if existing:
            attendance_id = existing.attendance_id
        else:
            self._id += 1
            attendance_id = self._id
        self._days[(job_id, year, month, day)] = AttendanceDay(
            attendance_id=attendance_id,
            job_id=job_id,
            year=year,
            month=month,
            day=day,
            status=status,
            time_in=time_in,
            time_out=time_out,
            hours_worked=hours_worked,
            notes=notes,
        )
        return attendance_id

    def list_days(self, *, job_id, year, month):
        return [d for k, d in sorted(self._days.items()) if k[:3] == (job_id, year, month)]

    def get_monthly(self, *, job_id, year, month):
        return self._monthly.get((job_id, year, month))

    def upsert_monthly(self, record: MonthlyAttendance) -> None:
        self._monthly[(record.job_id, record.year, record.month)] = record

    def add_day(self, job_id, year, month, day, status=AttendanceStatus.PRESENT, hours="8"):
        return self.upsert_day(
            job_id=job_id,
            year=year,
            month=month,
            day=day,
            status=status,
            time_in=time(9, 0),
            time_out=time(17, 0),
            hours_worked=Decimal(hours),
            notes="",
        )


class InMemoryCalendar:
    def __init__(self, days: Optional[dict] = None):
        self._days = dict(days or {})

    def working_days(self, *, year, month):
        return self._days.get((year, month))

    def set_working_days(self, *, year, month, working_days):
        self._days[(year, month)] = working_days


class InMemoryInvoices:
    def __init__(self):
        self.invoices: dict[int, Invoice] = {}
        self.fail_commit = False
        self._id = 0

    def commit(self, invoice: Invoice) -> PersistedInvoiceRef:
        if self.fail_commit:
            raise PersistenceError("store unavailable")
        self._id += 1
        self.invoices[self._id] = replace(invoice, invoice_id=self._id, diagnostics=())
        return PersistedInvoiceRef(invoice_id=self._id, line_count=len(invoice.lines))

    def attach_storage(self, invoice_id: int, locator: str) -> None:
        if invoice_id not in self.invoices:
            raise NotFoundError(f"Invoice {invoice_id} not found")
        self.invoices[invoice_id] = self.invoices[invoice_id].with_storage(locator)

    def get(self, invoice_id: int) -> Optional[Invoice]:
        return self.invoices.get(invoice_id)

    def list_invoices(self, *, year=None, month=None, limit=200):
        out = []
        for invoice_id in sorted(self.invoices, reverse=True):
            inv = self.invoices[invoice_id]
            if year is not None and inv.year != year:
                continue
            if month is not None and inv.month != month:
                continue
            out.append({"invoice_id": invoice_id, "year": inv.year, "month": inv.month})
        return out[:limit]

    def list_lines_for_job(self, job_id: int):
        out = []
        for invoice_id in sorted(self.invoices, reverse=True):
            inv = self.invoices[invoice_id]
            for line in inv.lines:
                if line.job_id == job_id:
                    out.append(
                        {
                            "invoice_id": invoice_id,
                            "year": inv.year,
                            "month": inv.month,
                            "billed_amount": line.billed_amount,
                            "salary_amount": line.salary_amount,
                            "commission": line.commission,
                            "net_profit": line.net_profit,
                        }
                    )
        return out


class InMemoryBlobStore:
    def __init__(self):
        self.blobs: dict[str, bytes] = {}
        self.fail = False

    def put(self, key: str, data: bytes, content_type: str) -> str:
        if self.fail:
            raise RenderingOrStorageError("bucket unavailable")
        locator = f"mem://invoices/{key}"
        self.blobs[locator] = data
        return locator

    def get(self, locator: str) -> bytes:
        if locator not in self.blobs:
            raise NotFoundError(locator)
        return self.blobs[locator]


class InMemoryUsers:
    def __init__(self, users: Sequence[User] = ()):
        self._users = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.username == username), None)


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def jobs_repo(attendance_repo):
    return InMemoryJobs(attendance=attendance_repo)


@pytest.fixture
def calendar_repo():
    return InMemoryCalendar({(2025, 3): 22})


@pytest.fixture
def invoices_repo():
    return InMemoryInvoices()


@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def users_repo():
    return InMemoryUsers(
        [
            User(1, "Admin", "admin", generate_password_hash("admin123"), Role.ADMIN),
            User(2, "Staff", "staff", generate_password_hash("staff123"), Role.STAFF),
            User(3, "Gone", "gone", generate_password_hash("gone123"), Role.STAFF, is_active=False),
        ]
    )


@pytest.fixture
def token_service():
    return TokenService("test-secret", expire_minutes=5)


@pytest.fixture
def container(users_repo, jobs_repo, calendar_repo, attendance_repo, invoices_repo, blob_store, token_service):
    return assemble(
        users_repo=users_repo,
        jobs_repo=jobs_repo,
        workdays_repo=calendar_repo,
        attendance_repo=attendance_repo,
        invoices_repo=invoices_repo,
        blob_store=blob_store,
        token_service=token_service,
    )
