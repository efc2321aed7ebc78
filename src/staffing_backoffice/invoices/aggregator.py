from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol, Sequence

from ..attendance.model import AttendanceMonthSummary
from ..common.money import ZERO
from ..common.validators import require_period
from ..core.exceptions import (
    AggregationCancelledError,
    InvalidInputError,
    MissingAttendanceError,
    NotFoundError,
)
from ..jobs.model import Job
from ..jobs.repository import JobRepository
from ..payroll.service import JobCompensationService
from .model import Invoice, InvoiceLine, InvoiceScope, JobDiagnostic, JobSetScope, PartnerScope, SingleJobScope

logger = logging.getLogger(__name__)

# Per-job failures that drop the job from a multi-job invoice instead of aborting it.
_SKIPPABLE = {
    NotFoundError: "NotFound",
    MissingAttendanceError: "MissingAttendance",
    InvalidInputError: "InvalidInput",
}


class AttendanceSummarySource(Protocol):
    def summarize(
        self, *, job_id: int, year: int, month: int, working_days: Optional[int] = None
    ) -> Optional[AttendanceMonthSummary]:
        raise NotImplementedError


class WorkingDaysProvider(Protocol):
    def require_working_days(self, *, year: int, month: int) -> int:
        raise NotImplementedError


def _diagnostic(job_id: int, exc: Exception) -> JobDiagnostic:
    kind = next(name for cls, name in _SKIPPABLE.items() if isinstance(exc, cls))
    return JobDiagnostic(job_id=int(job_id), kind=kind, message=str(exc))


class InvoiceAggregator:
    """Builds an (unpersisted) invoice for a scope and period.

    Jobs are processed in ascending id so line order and totals are reproducible.
    A single-job scope fails on the first problem; partner and job-set scopes
    drop the failing job and report it in Invoice.diagnostics.
    """

    def __init__(
        self,
        jobs: JobRepository,
        attendance: AttendanceSummarySource,
        calendar: WorkingDaysProvider,
        *,
        compensation: Optional[JobCompensationService] = None,
    ):
        self._jobs = jobs
        self._attendance = attendance
        self._calendar = calendar
        self._compensation = compensation or JobCompensationService()

    def aggregate(
        self,
        scope: InvoiceScope,
        year,
        month,
        *,
        is_cancelled: Optional[Callable[[], bool]] = None,
    ) -> Invoice:
        year, month = require_period(year, month)
        jobs, diagnostics = self._resolve_jobs(scope, year, month)
        strict = isinstance(scope, SingleJobScope)

        working_days = self._calendar.require_working_days(year=year, month=month)

        lines: list[InvoiceLine] = []
        for job in sorted(jobs, key=lambda j: j.id):
            if is_cancelled and is_cancelled():
                raise AggregationCancelledError(f"Aggregation for {scope.label} cancelled before job {job.id}")
            try:
                lines.append(self._line_for(job, year, month, working_days))
            except tuple(_SKIPPABLE) as exc:
                if strict:
                    raise
                diagnostics.append(_diagnostic(job.id, exc))
                logger.warning("Skipping job %s for %s %s/%s: %s", job.id, scope.label, month, year, exc)

        if not lines:
            skipped = ", ".join(str(d.job_id) for d in diagnostics)
            raise NotFoundError(
                f"No jobs with attendance found for {scope.label} in {month}/{year}"
                + (f" (skipped: {skipped})" if skipped else "")
            )

        total_billing = total_salary = total_commission = net_profit = ZERO
        for line in lines:
            total_billing += line.billed_amount
            total_salary += line.salary_amount
            total_commission += line.commission
            net_profit += line.net_profit

        return Invoice(
            scope=scope,
            year=year,
            month=month,
            lines=tuple(lines),
            total_billing_amount=total_billing,
            total_salary_amount=total_salary,
            total_commission=total_commission,
            net_profit=net_profit,
            diagnostics=tuple(sorted(diagnostics, key=lambda d: d.job_id)),
        )

    def _resolve_jobs(self, scope: InvoiceScope, year: int, month: int) -> tuple[Sequence[Job], list[JobDiagnostic]]:
        diagnostics: list[JobDiagnostic] = []

        if isinstance(scope, SingleJobScope):
            job = self._jobs.get_by_id(scope.job_id)
            if not job:
                raise NotFoundError(f"Job {scope.job_id} not found")
            return [job], diagnostics

        if isinstance(scope, PartnerScope):
            jobs = [j for j in self._jobs.list_for_partner(scope.partner_id) if j.is_active_in(year, month)]
            if not jobs:
                raise NotFoundError(f"No jobs found for partner {scope.partner_id} in {month}/{year}")
            return jobs, diagnostics

        if isinstance(scope, JobSetScope):
            wanted = set(scope.job_ids)
            jobs = [j for j in self._jobs.list_by_ids(scope.job_ids) if j.id in wanted]
            found = {j.id for j in jobs}
            for missing in sorted(wanted - found):
                diagnostics.append(JobDiagnostic(job_id=missing, kind="NotFound", message=f"Job {missing} not found"))
            if not jobs:
                raise NotFoundError("No jobs found for the provided IDs.")
            return jobs, diagnostics

        raise InvalidInputError(f"Unsupported invoice scope: {scope!r}")

    def _line_for(self, job: Job, year: int, month: int, working_days: int) -> InvoiceLine:
        summary = self._attendance.summarize(job_id=job.id, year=year, month=month, working_days=working_days)
        if summary is None:
            raise MissingAttendanceError(job.id)

        comp = self._compensation.compute(job, summary)
        return InvoiceLine(
            job_id=job.id,
            candidate_name=job.candidate_name,
            client_company=job.client_company,
            present_days=summary.present_days,
            total_hours=summary.total_hours,
            attendance=summary.counts,
            working_days=summary.total_working_days,
            billing=comp.billing,
            salary=comp.salary,
            commission=comp.commission,
            net_profit=comp.net_profit,
        )
