from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from ..attendance.model import AttendanceCounts
from ..common.money import ZERO, money_str
from ..core.enums import ScopeKind
from ..core.exceptions import InvalidInputError
from ..payroll.model import CompensationResult


@dataclass(frozen=True)
class SingleJobScope:
    job_id: int

    kind = ScopeKind.JOB

    @property
    def key(self) -> str:
        return str(self.job_id)

    @property
    def label(self) -> str:
        return f"Job {self.job_id}"


@dataclass(frozen=True)
class PartnerScope:
    partner_id: str

    kind = ScopeKind.PARTNER

    def __post_init__(self):
        if not str(self.partner_id or "").strip():
            raise InvalidInputError("partner_company_id is required")
        object.__setattr__(self, "partner_id", str(self.partner_id).strip())

    @property
    def key(self) -> str:
        return self.partner_id

    @property
    def label(self) -> str:
        return f"Partner: {self.partner_id}"


@dataclass(frozen=True)
class JobSetScope:
    """An explicit set of jobs; stored sorted and without duplicates."""

    job_ids: tuple[int, ...]

    kind = ScopeKind.JOB_SET

    def __post_init__(self):
        try:
            ids = tuple(sorted({int(i) for i in self.job_ids}))
        except (TypeError, ValueError):
            raise InvalidInputError("job_ids must be a list of integers") from None
        if not ids:
            raise InvalidInputError("job_ids[] must not be empty")
        object.__setattr__(self, "job_ids", ids)

    @property
    def key(self) -> str:
        return ",".join(str(i) for i in self.job_ids)

    @property
    def label(self) -> str:
        return f"Jobs: {', '.join(str(i) for i in self.job_ids)}"


InvoiceScope = Union[SingleJobScope, PartnerScope, JobSetScope]


def scope_from_record(kind: str, key: str) -> InvoiceScope:
    """Rebuild a scope from its persisted discriminator and key."""
    kind = ScopeKind(kind)
    if kind == ScopeKind.JOB:
        return SingleJobScope(int(key))
    if kind == ScopeKind.PARTNER:
        return PartnerScope(key)
    return JobSetScope(tuple(int(k) for k in key.split(",") if k))


@dataclass(frozen=True)
class JobDiagnostic:
    """Why a job of a multi-job scope was left out of the invoice."""

    job_id: int
    kind: str
    message: str

    def to_dict(self) -> dict:
        return {"job_id": self.job_id, "kind": self.kind, "message": self.message}


@dataclass(frozen=True)
class InvoiceLine:
    """One job's contribution to an invoice, snapshotted at commit time."""

    job_id: int
    candidate_name: str
    client_company: str
    present_days: Decimal
    total_hours: Decimal
    attendance: AttendanceCounts
    working_days: int
    billing: CompensationResult
    salary: CompensationResult
    commission: Decimal
    net_profit: Decimal

    @property
    def billed_amount(self) -> Decimal:
        return self.billing.total

    @property
    def salary_amount(self) -> Decimal:
        return self.salary.total

    def to_dict(self) -> dict:
        return {
            "job_id": self.job_id,
            "candidate_name": self.candidate_name,
            "client_company": self.client_company,
            "present_days": str(self.present_days),
            "total_hours": str(self.total_hours),
            "billed_amount": money_str(self.billed_amount),
            "salary_amount": money_str(self.salary_amount),
            "commission": money_str(self.commission),
            "net_profit": money_str(self.net_profit),
            "attendance": {
                "regular_days": str(self.attendance.regular_days_worked),
                "weekend_days": str(self.attendance.weekend_days_worked),
                "holiday_days": str(self.attendance.holiday_days_worked),
                "leaves_taken": str(self.attendance.leaves_taken),
                "overtime_hours": str(self.attendance.overtime_hours),
                "working_days": self.working_days,
            },
            "billing": self.billing.to_dict(),
            "salary": self.salary.to_dict(),
        }


@dataclass(frozen=True)
class Invoice:
    """Invoice aggregate.

    net_profit always equals total_billing_amount - total_salary_amount - total_commission;
    storage_locator stays empty until the rendered document has been stored.
    """

    scope: InvoiceScope
    year: int
    month: int
    lines: tuple[InvoiceLine, ...]
    total_billing_amount: Decimal = ZERO
    total_salary_amount: Decimal = ZERO
    total_commission: Decimal = ZERO
    net_profit: Decimal = ZERO
    diagnostics: tuple[JobDiagnostic, ...] = field(default=())
    invoice_id: Optional[int] = None
    storage_locator: str = ""
    created_at: Optional[datetime] = None

    @property
    def document_pending(self) -> bool:
        return not self.storage_locator

    @property
    def skipped_job_ids(self) -> list[int]:
        return [d.job_id for d in self.diagnostics]

    def with_storage(self, locator: str) -> "Invoice":
        return replace(self, storage_locator=locator)

    def to_dict(self) -> dict:
        return {
            "invoice_id": self.invoice_id,
            "scope": {"kind": self.scope.kind.value, "key": self.scope.key, "label": self.scope.label},
            "period": {"year": self.year, "month": self.month},
            "lines": [line.to_dict() for line in self.lines],
            "total_billing_amount": money_str(self.total_billing_amount),
            "total_salary_amount": money_str(self.total_salary_amount),
            "total_commission": money_str(self.total_commission),
            "net_profit": money_str(self.net_profit),
            "storage_locator": self.storage_locator,
            "document_pending": self.document_pending,
            "skipped_jobs": [d.to_dict() for d in self.diagnostics],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class PersistedInvoiceRef:
    invoice_id: int
    line_count: int
