from datetime import date
from decimal import Decimal

import pytest

from staffing_backoffice.core.enums import PaymentFrequency
from staffing_backoffice.core.exceptions import NotFoundError

from ..conftest import make_job


@pytest.fixture
def finance(container):
    return container.job_finance_service


def test_financial_summary_of_monthly_job(finance, jobs_repo):
    jobs_repo.add(make_job(1, start_date=date(2025, 1, 1), end_date=date(2025, 3, 31)))

    data = finance.financial_summary(1)

    assert data["rate_basis"] == "monthly"
    assert data["profit_margin"] == "1100.00"
    assert data["profit_percentage"] == "33.33"
    assert data["days_duration"] == 89
    assert data["start_date"] == "2025-01-01"


def test_open_ended_job_runs_until_today(finance, jobs_repo):
    jobs_repo.add(make_job(1, start_date=date(2025, 1, 1)))

    data = finance.financial_summary(1, today=date(2025, 1, 11))

    assert data["days_duration"] == 10
    assert data["end_date"] is None


def test_hourly_job_margin_uses_hourly_rates(finance, jobs_repo):
    jobs_repo.add(
        make_job(
            1,
            payment_frequency=PaymentFrequency.HOURLY,
            candidate_salary=None,
            client_billing_amount=None,
            hourly_rate=Decimal("12"),
            billing_hourly_rate=Decimal("20"),
        )
    )

    data = finance.financial_summary(1)

    assert data["rate_basis"] == "per_hour"
    assert data["profit_margin"] == "8.00"
    assert data["profit_percentage"] == "40.00"
    assert data["days_duration"] is None


def test_zero_billing_has_no_percentage(finance, jobs_repo):
    jobs_repo.add(make_job(1, client_billing_amount=Decimal("0")))

    data = finance.financial_summary(1)

    assert data["profit_margin"] == "-2200.00"
    assert data["profit_percentage"] is None


def test_financial_summary_unknown_job(finance):
    with pytest.raises(NotFoundError):
        finance.financial_summary(99)


def test_active_summary_counts_only_active_jobs(finance, jobs_repo):
    jobs_repo.add(make_job(1))
    jobs_repo.add(make_job(2, candidate_salary=Decimal("1000"), client_billing_amount=Decimal("2000")))
    jobs_repo.add(make_job(3, status="completed"))
    jobs_repo.add(make_job(4, candidate_salary=None, client_billing_amount=None))

    data = finance.active_summary()

    assert data["total_active_jobs"] == 3
    assert data["total_billing_amount"] == "5300.00"
    assert data["total_salary_cost"] == "3200.00"
    assert data["total_profit"] == "2100.00"
    # mean of 33.33 and 50.00
    assert data["avg_profit_percentage"] == "41.67"


def test_active_summary_without_jobs(finance):
    data = finance.active_summary()

    assert data["total_active_jobs"] == 0
    assert data["total_profit"] == "0.00"
    assert data["avg_profit_percentage"] is None
