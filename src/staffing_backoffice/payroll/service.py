from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..attendance.model import AttendanceMonthSummary
from ..common.money import money
from ..core.exceptions import InvalidInputError
from ..jobs.model import Job
from .calculator.base import CompensationCalculator
from .calculator.standard_calculator import StandardCompensationCalculator
from .model import JobCompensation


class JobCompensationService:
    """Runs the calculator for a job's pay and its client billing over one month."""

    def __init__(self, *, calculator: Optional[CompensationCalculator] = None):
        self._calculator = calculator or StandardCompensationCalculator()

    def compute(self, job: Job, summary: AttendanceMonthSummary) -> JobCompensation:
        salary_base, salary_mode = job.salary_terms()
        billing_base, billing_mode = job.billing_terms()

        salary = self._calculator.compute(salary_base, salary_mode, summary.counts, summary.total_working_days)
        billing = self._calculator.compute(billing_base, billing_mode, summary.counts, summary.total_working_days)

        # Commission applies to the full billing total, overtime included.
        rate = job.commission_percentage or Decimal("0")
        if rate < 0 or rate > 100:
            raise InvalidInputError(f"Job {job.id} commission_percentage must be between 0 and 100")
        commission = money(billing.total * rate / Decimal("100")) if rate else money(0)
        net_profit = billing.total - salary.total - commission

        return JobCompensation(salary=salary, billing=billing, commission=commission, net_profit=net_profit)
