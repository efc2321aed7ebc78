from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_ACCESS_TOKEN_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .invoices.aggregator import InvoiceAggregator
from .invoices.mysql_invoice_repository import MySQLInvoiceRepository
from .invoices.repository import InvoiceRepository
from .invoices.service import InvoiceService
from .invoices.storage import BlobStore, LocalBlobStore
from .jobs.mysql_job_repository import MySQLJobRepository
from .jobs.repository import JobRepository
from .jobs.service import JobFinanceService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, TokenService
from .workdays.mysql_workday_repository import MySQLWorkingCalendar
from .workdays.repository import WorkingCalendar
from .workdays.service import WorkingCalendarService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    jobs_repo: JobRepository
    workdays_repo: WorkingCalendar
    attendance_repo: AttendanceRepository
    invoices_repo: InvoiceRepository
    blob_store: BlobStore

    auth_service: AuthService
    workday_service: WorkingCalendarService
    attendance_service: AttendanceService
    invoice_service: InvoiceService
    job_finance_service: JobFinanceService


def assemble(
    *,
    users_repo: UserRepository,
    jobs_repo: JobRepository,
    workdays_repo: WorkingCalendar,
    attendance_repo: AttendanceRepository,
    invoices_repo: InvoiceRepository,
    blob_store: BlobStore,
    token_service: TokenService,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over the given repositories (MySQL ones or test fakes)."""

    workday_service = WorkingCalendarService(workdays_repo)
    attendance_service = AttendanceService(attendance_repo, jobs_repo, workday_service)
    aggregator = InvoiceAggregator(jobs_repo, attendance_service, workday_service)

    return Container(
        conn=conn,
        users_repo=users_repo,
        jobs_repo=jobs_repo,
        workdays_repo=workdays_repo,
        attendance_repo=attendance_repo,
        invoices_repo=invoices_repo,
        blob_store=blob_store,
        auth_service=AuthService(users_repo, token_service),
        workday_service=workday_service,
        attendance_service=attendance_service,
        invoice_service=InvoiceService(aggregator, invoices_repo, jobs_repo, blob_store),
        job_finance_service=JobFinanceService(jobs_repo, invoices_repo),
    )


def build_container(*, db_config: dict, settings: Any) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    token_service = TokenService(
        getattr(settings, "SECRET_KEY"),
        algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
        expire_minutes=getattr(settings, "ACCESS_TOKEN_EXPIRE_MINUTES", DEFAULT_ACCESS_TOKEN_MINUTES),
    )
    blob_store = LocalBlobStore(
        getattr(settings, "STORAGE_DIR", "./storage"),
        getattr(settings, "STORAGE_BASE_URL", "/storage"),
    )

    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        jobs_repo=MySQLJobRepository(conn),
        workdays_repo=MySQLWorkingCalendar(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        invoices_repo=MySQLInvoiceRepository(conn),
        blob_store=blob_store,
        token_service=token_service,
    )
