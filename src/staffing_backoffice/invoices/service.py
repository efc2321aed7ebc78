from __future__ import annotations

import io
import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence

import pandas as pd

from ..common.datetime_utils import now_local
from ..common.money import ZERO
from ..common.validators import require_int, require_period
from ..core.constants import DEFAULT_INVOICE_LIST_LIMIT
from ..core.exceptions import NotFoundError, PersistenceError, RenderingOrStorageError
from ..jobs.repository import JobRepository
from .aggregator import InvoiceAggregator
from .model import Invoice, InvoiceScope, JobSetScope
from .rendering import PdfInvoiceRenderer, build_document
from .repository import InvoiceRepository
from .storage import BlobStore

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


@dataclass(frozen=True)
class GenerationResult:
    """A committed invoice plus the outcome of its document step."""

    invoice: Invoice
    document_error: Optional[str] = None

    @property
    def document_pending(self) -> bool:
        return self.invoice.document_pending

    def to_dict(self) -> dict:
        data = self.invoice.to_dict()
        data["document_error"] = self.document_error
        return data


def document_file_name(invoice: Invoice) -> str:
    # Scope keys may hold path separators or run long; the invoice id is unique.
    return f"invoice_{invoice.scope.kind.value}_{invoice.year}_{invoice.month:02d}_{invoice.invoice_id}.pdf"


class InvoiceService:
    """Generate, store and look up invoices.

    Generation is aggregate -> commit -> render/store -> attach_storage. Once the
    commit succeeded the invoice is kept even if the document step fails; the
    document can be produced later with regenerate_document().
    """

    def __init__(
        self,
        aggregator: InvoiceAggregator,
        invoices: InvoiceRepository,
        jobs: JobRepository,
        blob_store: BlobStore,
        *,
        renderer: Optional[PdfInvoiceRenderer] = None,
    ):
        self._aggregator = aggregator
        self._invoices = invoices
        self._jobs = jobs
        self._blob_store = blob_store
        self._renderer = renderer or PdfInvoiceRenderer()

    def generate(
        self,
        scope: InvoiceScope,
        year,
        month,
        *,
        is_cancelled: Optional[Callable[[], bool]] = None,
    ) -> GenerationResult:
        invoice = self._aggregator.aggregate(scope, year, month, is_cancelled=is_cancelled)
        ref = self._invoices.commit(invoice)
        invoice = replace(invoice, invoice_id=ref.invoice_id, created_at=now_local())
        logger.info(
            "Committed invoice %s for %s %s/%s (%s lines, %s skipped)",
            ref.invoice_id,
            scope.label,
            invoice.month,
            invoice.year,
            ref.line_count,
            len(invoice.diagnostics),
        )
        return self._attach_document(invoice)

    def _attach_document(self, invoice: Invoice) -> GenerationResult:
        try:
            data = self._renderer.render(build_document(invoice))
            locator = self._blob_store.put(document_file_name(invoice), data, PDF_CONTENT_TYPE)
        except Exception as exc:
            # The committed invoice stays as is; only the locator is missing.
            logger.exception("Document for invoice %s could not be produced", invoice.invoice_id)
            return GenerationResult(invoice=invoice, document_error=str(exc))

        try:
            self._invoices.attach_storage(invoice.invoice_id, locator)
        except PersistenceError as exc:
            logger.error("Stored %s but could not attach it to invoice %s: %s", locator, invoice.invoice_id, exc)
            return GenerationResult(invoice=invoice, document_error=str(exc))
        logger.info("Invoice %s document stored at %s", invoice.invoice_id, locator)
        return GenerationResult(invoice=invoice.with_storage(locator))

    def regenerate_document(self, invoice_id) -> GenerationResult:
        return self._attach_document(self.get_invoice(invoice_id))

    def get_invoice(self, invoice_id) -> Invoice:
        invoice_id = require_int(invoice_id, "invoice_id")
        invoice = self._invoices.get(invoice_id)
        if not invoice:
            raise NotFoundError(f"Invoice {invoice_id} not found")
        return invoice

    def list_invoices(self, *, year=None, month=None, limit: int = DEFAULT_INVOICE_LIST_LIMIT) -> Sequence[dict]:
        if year is not None and month is not None:
            year, month = require_period(year, month)
        elif year is not None:
            year = require_int(year, "year")
        elif month is not None:
            month = require_int(month, "month")
        return self._invoices.list_invoices(year=year, month=month, limit=limit)

    def open_document(self, invoice_id) -> tuple[str, bytes]:
        invoice = self.get_invoice(invoice_id)
        if invoice.document_pending:
            raise NotFoundError(f"Invoice {invoice.invoice_id} has no stored document yet")
        try:
            data = self._blob_store.get(invoice.storage_locator)
        except OSError as exc:
            raise RenderingOrStorageError(f"Document for invoice {invoice.invoice_id} unreadable: {exc}") from exc
        return document_file_name(invoice), data

    def monthly_overview(self, year, month) -> dict:
        """Uncommitted preview of every job with attendance in the month."""

        year, month = require_period(year, month)
        jobs = self._jobs.list_with_attendance(year=year, month=month)
        if not jobs:
            zero = f"{ZERO:.2f}"
            return {
                "period": {"year": year, "month": month},
                "lines": [],
                "skipped_jobs": [],
                "total_billing_amount": zero,
                "total_salary_amount": zero,
                "total_commission": zero,
                "net_profit": zero,
            }

        preview = self._aggregator.aggregate(JobSetScope(tuple(j.id for j in jobs)), year, month)
        data = preview.to_dict()
        for key in ("invoice_id", "storage_locator", "document_pending", "created_at", "scope"):
            data.pop(key, None)
        return data

    def export_lines_xlsx(self, invoice_id) -> tuple[str, bytes]:
        invoice = self.get_invoice(invoice_id)

        rows = []
        for line in invoice.lines:
            rows.append(
                {
                    "Job ID": line.job_id,
                    "Candidate": line.candidate_name,
                    "Client": line.client_company,
                    "Present days": float(line.present_days),
                    "Total hours": float(line.total_hours),
                    "Working days": line.working_days,
                    "Billed": float(line.billed_amount),
                    "Salary": float(line.salary_amount),
                    "Commission": float(line.commission),
                    "Net profit": float(line.net_profit),
                }
            )

        df = pd.DataFrame(rows)
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Invoice")
        output.seek(0)

        name = document_file_name(invoice).rsplit(".", 1)[0] + ".xlsx"
        return name, output.getvalue()
