from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.money import ZERO, money, money_str
from ..common.validators import require_int
from ..core.enums import FrequencyMode
from ..core.exceptions import NotFoundError
from .model import Job
from .repository import JobRepository


def _opt(value: Optional[Decimal]) -> Optional[str]:
    return money_str(value) if value is not None else None


def profit_percentage(billing: Optional[Decimal], salary: Optional[Decimal]) -> Optional[Decimal]:
    """(billing - salary) / billing * 100, or None when billing is missing or zero."""
    if billing is None or salary is None or billing == 0:
        return None
    return money((billing - salary) / billing * Decimal("100"))


def _job_dict(job: Job) -> dict:
    return {
        "id": job.id,
        "title": job.title,
        "candidate_name": job.candidate_name,
        "client_company": job.client_company,
        "partner_company": job.partner_company,
        "payment_frequency": job.payment_frequency.value,
        "payment_currency": job.payment_currency,
        "candidate_salary": _opt(job.candidate_salary),
        "client_billing_amount": _opt(job.client_billing_amount),
        "hourly_rate": _opt(job.hourly_rate),
        "billing_hourly_rate": _opt(job.billing_hourly_rate),
        "commission_percentage": str(job.commission_percentage),
    }


class JobFinanceService:
    """Money views of jobs: invoiced history, contracted margin and the active-jobs roll-up."""

    def __init__(self, jobs: JobRepository, invoices):
        self._jobs = jobs
        self._invoices = invoices

    def _require_job(self, job_id) -> Job:
        job_id = require_int(job_id, "job_id")
        job = self._jobs.get_by_id(job_id)
        if not job:
            raise NotFoundError("Job not found")
        return job

    def finance_summary(self, job_id) -> dict:
        job = self._require_job(job_id)
        lines = list(self._invoices.list_lines_for_job(job.id))

        total_billing = total_salary = total_commission = total_profit = ZERO
        for line in lines:
            total_billing += line["billed_amount"]
            total_salary += line["salary_amount"]
            total_commission += line["commission"]
            total_profit += line["net_profit"]

        months = {(line["year"], line["month"]) for line in lines}
        average = money(total_profit / Decimal(len(months))) if months else ZERO

        return {
            "job": _job_dict(job),
            "invoices": [
                {
                    "invoice_id": line["invoice_id"],
                    "year": line["year"],
                    "month": line["month"],
                    "billed_amount": money_str(line["billed_amount"]),
                    "salary_amount": money_str(line["salary_amount"]),
                    "commission": money_str(line["commission"]),
                    "net_profit": money_str(line["net_profit"]),
                }
                for line in lines
            ],
            "totals": {
                "total_billing": money_str(total_billing),
                "total_salary": money_str(total_salary),
                "total_commission": money_str(total_commission),
                "total_profit": money_str(total_profit),
                "average_monthly_profit": money_str(average),
                "months_invoiced": len(months),
            },
        }

    def financial_summary(self, job_id, *, today: Optional[date] = None) -> dict:
        """Contracted margin of one job, per month or per hour depending on its frequency.

        days_duration runs from start_date to end_date, or to today for open-ended jobs.
        """

        job = self._require_job(job_id)
        if job.frequency_mode == FrequencyMode.MONTHLY:
            salary, billing = job.candidate_salary, job.client_billing_amount
        else:
            salary, billing = job.hourly_rate, job.billing_hourly_rate

        margin = money(billing - salary) if billing is not None and salary is not None else None
        percentage = profit_percentage(billing, salary)

        days_duration = None
        if job.start_date:
            end = job.end_date or (today or now_local().date())
            days_duration = (end - job.start_date).days

        data = _job_dict(job)
        data.update(
            {
                "status": job.status,
                "start_date": job.start_date.isoformat() if job.start_date else None,
                "end_date": job.end_date.isoformat() if job.end_date else None,
                "rate_basis": job.frequency_mode.value,
                "profit_margin": _opt(margin),
                "profit_percentage": str(percentage) if percentage is not None else None,
                "days_duration": days_duration,
            }
        )
        return data

    def active_summary(self) -> dict:
        """Totals of the monthly contract amounts over every active job."""

        jobs = list(self._jobs.list_active())

        total_billing = total_salary = total_profit = ZERO
        percentages = []
        for job in jobs:
            billing, salary = job.client_billing_amount, job.candidate_salary
            if billing is not None:
                total_billing += billing
            if salary is not None:
                total_salary += salary
            if billing is not None and salary is not None:
                total_profit += billing - salary
            pct = profit_percentage(billing, salary)
            if pct is not None:
                percentages.append(pct)

        average = money(sum(percentages) / Decimal(len(percentages))) if percentages else None
        return {
            "total_active_jobs": len(jobs),
            "total_billing_amount": money_str(total_billing),
            "total_salary_cost": money_str(total_salary),
            "total_profit": money_str(total_profit),
            "avg_profit_percentage": str(average) if average is not None else None,
        }
