from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Invoice, PersistedInvoiceRef


class InvoiceRepository(Protocol):
    """Invoice sink.

    commit() writes the aggregate and every line item as one unit; attach_storage()
    later fills in the storage locator and touches nothing else.
    """

    def commit(self, invoice: Invoice) -> PersistedInvoiceRef:
        raise NotImplementedError

    def attach_storage(self, invoice_id: int, locator: str) -> None:
        raise NotImplementedError

    def get(self, invoice_id: int) -> Optional[Invoice]:
        raise NotImplementedError

    def list_invoices(
        self, *, year: Optional[int] = None, month: Optional[int] = None, limit: int = 200
    ) -> Sequence[dict]:
        """Invoice headers (no line items), newest first."""

        raise NotImplementedError

    def list_lines_for_job(self, job_id: int) -> Sequence[dict]:
        """Committed line items of one job with their period, newest period first."""

        raise NotImplementedError
