from decimal import Decimal

import pytest

from staffing_backoffice.attendance.model import MonthlyAttendance
from staffing_backoffice.core.enums import AttendanceStatus, PaymentFrequency
from staffing_backoffice.core.exceptions import (
    AggregationCancelledError,
    InvalidInputError,
    MissingAttendanceError,
    NotFoundError,
)
from staffing_backoffice.invoices.aggregator import InvoiceAggregator
from staffing_backoffice.invoices.model import JobSetScope, PartnerScope, SingleJobScope
from staffing_backoffice.workdays.service import WorkingCalendarService

from ..conftest import make_job


def monthly(job_id, regular="20", weekend="1", overtime="3"):
    return MonthlyAttendance(
        job_id=job_id,
        year=2025,
        month=3,
        regular_days_worked=Decimal(regular),
        weekend_days_worked=Decimal(weekend),
        holiday_days_worked=Decimal("0"),
        leaves_taken=Decimal("0"),
        overtime_hours=Decimal(overtime),
    )


@pytest.fixture
def aggregator(container, jobs_repo, calendar_repo):
    return InvoiceAggregator(jobs_repo, container.attendance_service, WorkingCalendarService(calendar_repo))


def test_single_job_invoice(aggregator, jobs_repo, attendance_repo):
    jobs_repo.add(make_job(1))
    attendance_repo.upsert_monthly(monthly(1))

    invoice = aggregator.aggregate(SingleJobScope(1), 2025, 3)

    assert [line.job_id for line in invoice.lines] == [1]
    line = invoice.lines[0]
    assert line.salary_amount == Decimal("2256.25")
    assert line.billed_amount == Decimal("3384.38")
    assert invoice.total_billing_amount == Decimal("3384.38")
    assert invoice.total_salary_amount == Decimal("2256.25")
    assert invoice.total_commission == Decimal("338.44")
    assert invoice.net_profit == Decimal("789.69")
    assert invoice.diagnostics == ()
    assert invoice.invoice_id is None
    assert invoice.document_pending


def test_single_job_without_attendance_fails(aggregator, jobs_repo):
    jobs_repo.add(make_job(1))

    with pytest.raises(MissingAttendanceError) as exc_info:
        aggregator.aggregate(SingleJobScope(1), 2025, 3)
    assert exc_info.value.job_id == 1


def test_single_job_unknown(aggregator):
    with pytest.raises(NotFoundError):
        aggregator.aggregate(SingleJobScope(99), 2025, 3)


def test_partner_scope_reports_job_without_attendance(aggregator, jobs_repo, attendance_repo):
    jobs_repo.add(make_job(1))
    jobs_repo.add(make_job(2))
    jobs_repo.add(make_job(3, partner_company="OTHER"))
    attendance_repo.upsert_monthly(monthly(1))
    attendance_repo.upsert_monthly(monthly(3))

    invoice = aggregator.aggregate(PartnerScope("P1"), 2025, 3)

    assert [line.job_id for line in invoice.lines] == [1]
    assert [(d.job_id, d.kind) for d in invoice.diagnostics] == [(2, "MissingAttendance")]
    assert invoice.skipped_job_ids == [2]
    assert invoice.total_billing_amount == invoice.lines[0].billed_amount


def test_partner_scope_ignores_jobs_outside_period(aggregator, jobs_repo, attendance_repo):
    from datetime import date

    jobs_repo.add(make_job(1))
    jobs_repo.add(make_job(2, end_date=date(2025, 2, 28)))
    attendance_repo.upsert_monthly(monthly(1))

    invoice = aggregator.aggregate(PartnerScope("P1"), 2025, 3)

    assert [line.job_id for line in invoice.lines] == [1]
    assert invoice.diagnostics == ()


def test_partner_scope_with_nothing_billable(aggregator, jobs_repo):
    jobs_repo.add(make_job(1))

    with pytest.raises(NotFoundError):
        aggregator.aggregate(PartnerScope("P1"), 2025, 3)


def test_job_set_excludes_jobs_not_listed(aggregator, jobs_repo, attendance_repo):
    for job_id in (1, 2, 3):
        jobs_repo.add(make_job(job_id))
        attendance_repo.upsert_monthly(monthly(job_id))

    invoice = aggregator.aggregate(JobSetScope((3, 1, 3)), 2025, 3)

    assert [line.job_id for line in invoice.lines] == [1, 3]
    assert invoice.scope.key == "1,3"


def test_job_set_unknown_and_invalid_jobs_become_diagnostics(aggregator, jobs_repo, attendance_repo):
    jobs_repo.add(make_job(1))
    jobs_repo.add(make_job(2, payment_frequency=PaymentFrequency.HOURLY, hourly_rate=Decimal("10")))
    attendance_repo.upsert_monthly(monthly(1))
    attendance_repo.upsert_monthly(monthly(2))

    invoice = aggregator.aggregate(JobSetScope((1, 2, 7)), 2025, 3)

    assert [line.job_id for line in invoice.lines] == [1]
    assert [(d.job_id, d.kind) for d in invoice.diagnostics] == [(2, "InvalidInput"), (7, "NotFound")]


def test_aggregate_is_repeatable(aggregator, jobs_repo, attendance_repo):
    for job_id in (4, 2, 9):
        jobs_repo.add(make_job(job_id))
        attendance_repo.upsert_monthly(monthly(job_id, regular=str(job_id)))

    first = aggregator.aggregate(JobSetScope((9, 4, 2)), 2025, 3)
    second = aggregator.aggregate(JobSetScope((2, 9, 4)), 2025, 3)

    assert [line.job_id for line in first.lines] == [2, 4, 9]
    assert first.lines == second.lines
    assert first.total_billing_amount == second.total_billing_amount


def test_zero_present_days_gives_zero_amount(aggregator, jobs_repo, attendance_repo):
    jobs_repo.add(make_job(1))
    attendance_repo.add_day(1, 2025, 3, 3, status=AttendanceStatus.ABSENT, hours="0")

    invoice = aggregator.aggregate(SingleJobScope(1), 2025, 3)

    assert invoice.lines[0].billed_amount == Decimal("0.00")
    assert invoice.lines[0].present_days == Decimal("0")
    assert invoice.total_billing_amount == Decimal("0.00")


def test_totals_follow_line_items(aggregator, jobs_repo, attendance_repo):
    for job_id in (1, 2):
        jobs_repo.add(make_job(job_id))
        attendance_repo.upsert_monthly(monthly(job_id))

    invoice = aggregator.aggregate(JobSetScope((1, 2)), 2025, 3)

    assert invoice.total_billing_amount == sum(line.billed_amount for line in invoice.lines)
    assert invoice.total_salary_amount == sum(line.salary_amount for line in invoice.lines)
    assert invoice.total_commission == sum(line.commission for line in invoice.lines)
    assert invoice.net_profit == invoice.total_billing_amount - invoice.total_salary_amount - invoice.total_commission


def test_missing_working_days_is_terminal(container, jobs_repo, attendance_repo):
    jobs_repo.add(make_job(1))
    attendance_repo.upsert_monthly(monthly(1))
    aggregator = InvoiceAggregator(jobs_repo, container.attendance_service, WorkingCalendarService(_EmptyCalendar()))

    with pytest.raises(NotFoundError, match="working days"):
        aggregator.aggregate(JobSetScope((1,)), 2025, 3)


def test_cancellation_between_jobs(aggregator, jobs_repo, attendance_repo):
    for job_id in (1, 2, 3):
        jobs_repo.add(make_job(job_id))
        attendance_repo.upsert_monthly(monthly(job_id))
    polls = []

    def cancel_after_first():
        polls.append(1)
        return len(polls) > 1

    with pytest.raises(AggregationCancelledError):
        aggregator.aggregate(JobSetScope((1, 2, 3)), 2025, 3, is_cancelled=cancel_after_first)
    assert len(polls) == 2


@pytest.mark.parametrize("year,month", [(2025, 13), (2025, 0), (1999, 1)])
def test_invalid_period(aggregator, year, month):
    with pytest.raises(InvalidInputError):
        aggregator.aggregate(SingleJobScope(1), year, month)


class _EmptyCalendar:
    def working_days(self, *, year, month):
        return None

    def set_working_days(self, *, year, month, working_days):
        raise AssertionError("not expected")
