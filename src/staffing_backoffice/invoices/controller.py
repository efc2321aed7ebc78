from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.http import json_body, ok, token_required
from ..container import Container
from .model import JobSetScope, PartnerScope, SingleJobScope
from .service import GenerationResult


def _generated(result: GenerationResult):
    status = 201
    message = "Invoice generated"
    if result.document_pending:
        message = "Invoice saved; document could not be produced and can be regenerated"
    return ok(result.to_dict(), status=status, message=message)


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/api/invoices/generate/job/<int:job_id>/<int:year>/<int:month>",
        methods=["POST"],
        endpoint="api_generate_job_invoice",
    )
    @token_required(container, admin=True)
    def api_generate_job_invoice(job_id: int, year: int, month: int):
        return _generated(container.invoice_service.generate(SingleJobScope(job_id), year, month))

    @app.route("/api/invoices/generate-monthly", methods=["POST"], endpoint="api_generate_partner_invoice")
    @token_required(container, admin=True)
    def api_generate_partner_invoice():
        data = json_body()
        scope = PartnerScope(data.get("partner_company_id") or "")
        return _generated(container.invoice_service.generate(scope, data.get("year"), data.get("month")))

    @app.route("/api/invoices/generate", methods=["POST"], endpoint="api_generate_job_set_invoice")
    @token_required(container, admin=True)
    def api_generate_job_set_invoice():
        data = json_body()
        job_ids = data.get("job_ids") or []
        if not isinstance(job_ids, (list, tuple)):
            job_ids = [job_ids]
        scope = JobSetScope(tuple(job_ids))
        return _generated(container.invoice_service.generate(scope, data.get("year"), data.get("month")))

    @app.route("/api/invoices/overview/<int:year>/<int:month>", methods=["GET"], endpoint="api_invoice_overview")
    @token_required(container)
    def api_invoice_overview(year: int, month: int):
        return ok(container.invoice_service.monthly_overview(year, month))

    @app.route("/api/invoices", methods=["GET"], endpoint="api_list_invoices")
    @token_required(container)
    def api_list_invoices():
        rows = container.invoice_service.list_invoices(
            year=request.args.get("year"), month=request.args.get("month")
        )
        return ok(list(rows))

    @app.route("/api/invoices/<int:invoice_id>", methods=["GET"], endpoint="api_get_invoice")
    @token_required(container)
    def api_get_invoice(invoice_id: int):
        return ok(container.invoice_service.get_invoice(invoice_id).to_dict())

    @app.route("/api/invoices/<int:invoice_id>/document", methods=["POST"], endpoint="api_regenerate_document")
    @token_required(container, admin=True)
    def api_regenerate_document(invoice_id: int):
        result = container.invoice_service.regenerate_document(invoice_id)
        if result.document_pending:
            return ok(result.to_dict(), status=502, success=False, message=result.document_error)
        return ok(result.to_dict())

    @app.route("/api/invoices/<int:invoice_id>/document", methods=["GET"], endpoint="api_download_document")
    @token_required(container)
    def api_download_document(invoice_id: int):
        name, data = container.invoice_service.open_document(invoice_id)
        return send_file(io.BytesIO(data), download_name=name, mimetype="application/pdf", as_attachment=True)

    @app.route("/api/invoices/<int:invoice_id>/export.xlsx", methods=["GET"], endpoint="api_export_invoice")
    @token_required(container)
    def api_export_invoice(invoice_id: int):
        name, data = container.invoice_service.export_lines_xlsx(invoice_id)
        return send_file(
            io.BytesIO(data),
            download_name=name,
            as_attachment=True,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
