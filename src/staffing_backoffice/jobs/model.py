from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import month_bounds
from ..core.constants import DEFAULT_COMMISSION_PERCENTAGE
from ..core.enums import FrequencyMode, PaymentFrequency
from ..core.exceptions import InvalidInputError


@dataclass(frozen=True)
class Job:
    """A placed candidate at a client, with the financial terms used for pay and billing.

    Monthly jobs are paid from candidate_salary and billed from client_billing_amount;
    every other frequency is paid from hourly_rate and billed from billing_hourly_rate.
    """

    id: int
    candidate_id: int
    candidate_name: str
    client_company: str
    partner_company: Optional[str]
    payment_frequency: PaymentFrequency
    candidate_salary: Optional[Decimal] = None
    client_billing_amount: Optional[Decimal] = None
    hourly_rate: Optional[Decimal] = None
    billing_hourly_rate: Optional[Decimal] = None
    commission_percentage: Decimal = DEFAULT_COMMISSION_PERCENTAGE
    title: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str = "active"
    payment_currency: str = "USD"

    @property
    def frequency_mode(self) -> FrequencyMode:
        if self.payment_frequency == PaymentFrequency.MONTHLY:
            return FrequencyMode.MONTHLY
        return FrequencyMode.PER_HOUR

    def salary_terms(self) -> tuple[Decimal, FrequencyMode]:
        mode = self.frequency_mode
        amount = self.candidate_salary if mode == FrequencyMode.MONTHLY else self.hourly_rate
        field = "candidate_salary" if mode == FrequencyMode.MONTHLY else "hourly_rate"
        return self._require_amount(amount, field), mode

    def billing_terms(self) -> tuple[Decimal, FrequencyMode]:
        mode = self.frequency_mode
        amount = self.client_billing_amount if mode == FrequencyMode.MONTHLY else self.billing_hourly_rate
        field = "client_billing_amount" if mode == FrequencyMode.MONTHLY else "billing_hourly_rate"
        return self._require_amount(amount, field), mode

    def _require_amount(self, amount: Optional[Decimal], field: str) -> Decimal:
        if amount is None:
            raise InvalidInputError(f"Job {self.id} has no {field} for {self.payment_frequency.value} payment")
        return amount

    def is_active_in(self, year: int, month: int) -> bool:
        first, last = month_bounds(year, month)
        if self.start_date and self.start_date > last:
            return False
        if self.end_date and self.end_date < first:
            return False
        return True
