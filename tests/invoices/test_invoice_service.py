from decimal import Decimal

import pytest

from staffing_backoffice.attendance.model import MonthlyAttendance
from staffing_backoffice.container import assemble
from staffing_backoffice.core.exceptions import NotFoundError, PersistenceError
from staffing_backoffice.invoices.model import JobSetScope, PartnerScope, SingleJobScope
from staffing_backoffice.invoices.storage import LocalBlobStore

from ..conftest import make_job


def _monthly(job_id):
    return MonthlyAttendance(
        job_id=job_id,
        year=2025,
        month=3,
        regular_days_worked=Decimal("20"),
        weekend_days_worked=Decimal("1"),
        holiday_days_worked=Decimal("0"),
        leaves_taken=Decimal("0"),
        overtime_hours=Decimal("3"),
    )


@pytest.fixture
def seeded(jobs_repo, attendance_repo):
    for job_id in (1, 2):
        jobs_repo.add(make_job(job_id))
    attendance_repo.upsert_monthly(_monthly(1))


def test_generate_commits_and_attaches_document(container, invoices_repo, blob_store, seeded):
    result = container.invoice_service.generate(SingleJobScope(1), 2025, 3)

    assert result.invoice.invoice_id == 1
    assert not result.document_pending
    assert result.document_error is None
    stored = invoices_repo.get(1)
    assert stored.storage_locator == result.invoice.storage_locator
    assert stored.storage_locator.endswith("invoice_job_2025_03_1.pdf")
    assert blob_store.blobs[stored.storage_locator].startswith(b"%PDF")


def test_partner_invoice_carries_skipped_jobs(container, seeded):
    result = container.invoice_service.generate(PartnerScope("P1"), 2025, 3)

    body = result.to_dict()
    assert [line["job_id"] for line in body["lines"]] == [1]
    assert body["skipped_jobs"] == [
        {"job_id": 2, "kind": "MissingAttendance", "message": "No attendance recorded for job 2 in this period"}
    ]


def test_failed_storage_leaves_committed_invoice_pending(container, invoices_repo, blob_store, seeded):
    blob_store.fail = True

    result = container.invoice_service.generate(SingleJobScope(1), 2025, 3)

    assert result.document_pending
    assert "bucket unavailable" in result.document_error
    stored = container.invoice_service.get_invoice(result.invoice.invoice_id)
    assert stored.storage_locator == ""
    assert stored.total_billing_amount == Decimal("3384.38")


def test_regenerate_changes_only_the_locator(container, invoices_repo, blob_store, seeded):
    blob_store.fail = True
    result = container.invoice_service.generate(SingleJobScope(1), 2025, 3)
    before = invoices_repo.get(result.invoice.invoice_id)

    blob_store.fail = False
    retried = container.invoice_service.regenerate_document(result.invoice.invoice_id)
    after = invoices_repo.get(result.invoice.invoice_id)

    assert not retried.document_pending
    assert after.storage_locator
    assert after.lines == before.lines
    for field in ("total_billing_amount", "total_salary_amount", "total_commission", "net_profit"):
        assert str(getattr(after, field)) == str(getattr(before, field))


def test_failed_commit_stores_nothing(container, invoices_repo, blob_store, seeded):
    invoices_repo.fail_commit = True

    with pytest.raises(PersistenceError):
        container.invoice_service.generate(SingleJobScope(1), 2025, 3)

    assert invoices_repo.invoices == {}
    assert blob_store.blobs == {}


def test_open_document_requires_stored_document(container, blob_store, seeded):
    blob_store.fail = True
    result = container.invoice_service.generate(SingleJobScope(1), 2025, 3)

    with pytest.raises(NotFoundError):
        container.invoice_service.open_document(result.invoice.invoice_id)

    blob_store.fail = False
    container.invoice_service.regenerate_document(result.invoice.invoice_id)
    name, data = container.invoice_service.open_document(result.invoice.invoice_id)
    assert name == "invoice_job_2025_03_1.pdf"
    assert data.startswith(b"%PDF")


def test_get_unknown_invoice(container):
    with pytest.raises(NotFoundError):
        container.invoice_service.get_invoice(404)


def test_monthly_overview_is_not_committed(container, invoices_repo, seeded):
    overview = container.invoice_service.monthly_overview(2025, 3)

    assert [line["job_id"] for line in overview["lines"]] == [1]
    assert overview["total_billing_amount"] == "3384.38"
    assert invoices_repo.invoices == {}


def test_monthly_overview_of_empty_month(container):
    overview = container.invoice_service.monthly_overview(2025, 4)

    assert overview["lines"] == []
    assert overview["total_billing_amount"] == "0.00"


def test_export_lines_xlsx(container, seeded):
    result = container.invoice_service.generate(JobSetScope((1,)), 2025, 3)

    name, data = container.invoice_service.export_lines_xlsx(result.invoice.invoice_id)

    assert name == "invoice_job_set_2025_03_1.xlsx"
    # xlsx files are zip archives
    assert data[:2] == b"PK"


@pytest.fixture
def disk_container(users_repo, jobs_repo, calendar_repo, attendance_repo, invoices_repo, token_service, tmp_path):
    return assemble(
        users_repo=users_repo,
        jobs_repo=jobs_repo,
        workdays_repo=calendar_repo,
        attendance_repo=attendance_repo,
        invoices_repo=invoices_repo,
        blob_store=LocalBlobStore(str(tmp_path)),
        token_service=token_service,
    )


def test_partner_with_path_separator_stores_document(disk_container, jobs_repo, attendance_repo, tmp_path):
    jobs_repo.add(make_job(1, partner_company="Acme/EU"))
    attendance_repo.upsert_monthly(_monthly(1))

    result = disk_container.invoice_service.generate(PartnerScope("Acme/EU"), 2025, 3)

    assert not result.document_pending
    assert result.document_error is None
    assert (tmp_path / "invoices" / "invoice_partner_2025_03_1.pdf").exists()
    name, data = disk_container.invoice_service.open_document(result.invoice.invoice_id)
    assert name == "invoice_partner_2025_03_1.pdf"
    assert data.startswith(b"%PDF")


def test_large_job_set_stores_document(disk_container, jobs_repo, attendance_repo, tmp_path):
    job_ids = list(range(10000, 10060))
    for job_id in job_ids:
        jobs_repo.add(make_job(job_id))
        attendance_repo.upsert_monthly(_monthly(job_id))

    result = disk_container.invoice_service.generate(JobSetScope(job_ids), 2025, 3)

    assert len(result.invoice.lines) == 60
    assert not result.document_pending
    assert (tmp_path / "invoices" / "invoice_job_set_2025_03_1.pdf").exists()
