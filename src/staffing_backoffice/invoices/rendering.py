from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont

from ..common.money import money_str
from .model import Invoice

# A4 at 72 dpi
PAGE_SIZE = (595, 842)
MARGIN = 40
LINE_HEIGHT = 14

LINE_COLUMNS = (
    "job_id",
    "candidate_name",
    "client_company",
    "present_days",
    "total_hours",
    "billed_amount",
    "salary_amount",
    "commission",
    "net_profit",
)


@dataclass(frozen=True)
class InvoiceDocument:
    """Renderer input: header, one row per line item in line order, totals footer."""

    header: dict
    lines: Sequence[dict] = field(default=())
    footer: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"header": dict(self.header), "lines": [dict(r) for r in self.lines], "footer": dict(self.footer)}


def build_document(invoice: Invoice) -> InvoiceDocument:
    header = {
        "scope": invoice.scope.label,
        "period": f"{invoice.month:02d}/{invoice.year}",
        "invoice_id": invoice.invoice_id,
        "created_at": invoice.created_at.strftime("%Y-%m-%d %H:%M") if invoice.created_at else "",
    }
    lines = [
        {
            "job_id": line.job_id,
            "candidate_name": line.candidate_name,
            "client_company": line.client_company,
            "present_days": str(line.present_days),
            "total_hours": str(line.total_hours),
            "billed_amount": money_str(line.billed_amount),
            "salary_amount": money_str(line.salary_amount),
            "commission": money_str(line.commission),
            "net_profit": money_str(line.net_profit),
        }
        for line in invoice.lines
    ]
    footer = {
        "total_billing_amount": money_str(invoice.total_billing_amount),
        "total_salary_amount": money_str(invoice.total_salary_amount),
        "total_commission": money_str(invoice.total_commission),
        "net_profit": money_str(invoice.net_profit),
    }
    return InvoiceDocument(header=header, lines=lines, footer=footer)


class PdfInvoiceRenderer:
    """Draws an InvoiceDocument as plain text onto A4 pages and saves them as one PDF."""

    def __init__(self, *, page_size: tuple[int, int] = PAGE_SIZE):
        self._page_size = page_size
        self._font = ImageFont.load_default()

    def _text_rows(self, document: InvoiceDocument) -> list[str]:
        rows = ["INVOICE", ""]
        rows += [f"{k.replace('_', ' ').title()}: {v}" for k, v in document.header.items()]
        rows.append("")
        for n, line in enumerate(document.lines, start=1):
            rows.append(f"#{n}  Job {line['job_id']}  {line['candidate_name']}  ({line['client_company']})")
            rows.append(
                f"    days {line['present_days']}  hours {line['total_hours']}"
                f"  billed {line['billed_amount']}  salary {line['salary_amount']}"
            )
            rows.append(f"    commission {line['commission']}  net profit {line['net_profit']}")
        rows.append("")
        rows += [f"{k.replace('_', ' ').title()}: {v}" for k, v in document.footer.items()]
        return rows

    def render(self, document: InvoiceDocument) -> bytes:
        width, height = self._page_size
        per_page = max(1, (height - 2 * MARGIN) // LINE_HEIGHT)
        rows = self._text_rows(document)

        pages = []
        for start in range(0, len(rows), per_page):
            page = Image.new("RGB", self._page_size, "white")
            draw = ImageDraw.Draw(page)
            y = MARGIN
            for text in rows[start : start + per_page]:
                draw.text((MARGIN, y), text, fill="black", font=self._font)
                y += LINE_HEIGHT
            pages.append(page)

        out = io.BytesIO()
        pages[0].save(out, format="PDF", save_all=True, append_images=pages[1:], resolution=72.0)
        return out.getvalue()
