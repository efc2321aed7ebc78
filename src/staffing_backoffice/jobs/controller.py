from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok, token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/jobs/<int:job_id>/finance", methods=["GET"], endpoint="api_job_finance")
    @token_required(container)
    def api_job_finance(job_id: int):
        return ok(container.job_finance_service.finance_summary(job_id))

    @app.route("/api/jobs/<int:job_id>/financial-summary", methods=["GET"], endpoint="api_job_financial_summary")
    @token_required(container)
    def api_job_financial_summary(job_id: int):
        return ok(container.job_finance_service.financial_summary(job_id))

    @app.route("/api/jobs/summary/active", methods=["GET"], endpoint="api_active_jobs_summary")
    @token_required(container)
    def api_active_jobs_summary():
        return ok(container.job_finance_service.active_summary())

    @app.route("/api/jobs/attendance", methods=["POST"], endpoint="api_job_monthly_attendance")
    @token_required(container)
    def api_job_monthly_attendance():
        data = json_body()
        record = container.attendance_service.record_month(
            job_id=data.get("job_id"),
            year=data.get("year"),
            month=data.get("month"),
            regular_days_worked=data.get("regular_days_worked"),
            weekend_days_worked=data.get("weekend_days_worked"),
            holiday_days_worked=data.get("holiday_days_worked"),
            leaves_taken=data.get("leaves_taken"),
            overtime_hours=data.get("overtime_hours"),
            notes=data.get("notes"),
        )
        return ok(record.to_dict(), message="Attendance saved")

    @app.route(
        "/api/jobs/attendance/<int:job_id>/<int:year>/<int:month>",
        methods=["GET"],
        endpoint="api_job_attendance_summary",
    )
    @token_required(container)
    def api_job_attendance_summary(job_id: int, year: int, month: int):
        summary = container.attendance_service.get_summary(job_id=job_id, year=year, month=month)
        return ok(summary.to_dict())
