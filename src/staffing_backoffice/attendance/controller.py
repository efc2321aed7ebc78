from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok, token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/api/attendance/<int:job_id>/<int:year>/<int:month>/<int:day>",
        methods=["POST"],
        endpoint="api_record_attendance",
    )
    @token_required(container)
    def api_record_attendance(job_id: int, year: int, month: int, day: int):
        data = json_body()
        record = container.attendance_service.record_day(
            job_id=job_id,
            year=year,
            month=month,
            day=day,
            status=data.get("status"),
            time_in=data.get("time_in"),
            time_out=data.get("time_out"),
            hours_worked=data.get("hours_worked"),
            notes=data.get("notes"),
        )
        return ok(record.to_dict(), message="Attendance recorded")

    @app.route("/api/attendance/<int:attendance_id>", methods=["GET"], endpoint="api_get_attendance")
    @token_required(container)
    def api_get_attendance(attendance_id: int):
        return ok(container.attendance_service.get_record(attendance_id).to_dict())

    @app.route("/api/attendance/job/<int:job_id>/monthly", methods=["GET"], endpoint="api_job_month_view")
    @token_required(container)
    def api_job_month_view(job_id: int):
        view = container.attendance_service.month_view(
            job_id=job_id, year=request.args.get("year"), month=request.args.get("month")
        )
        summary = dict(view["summary"], total_hours=str(view["summary"]["total_hours"]))
        return ok(
            {
                "job_id": view["job_id"],
                "year": view["year"],
                "month": view["month"],
                "summary": summary,
                "attendance": [d.to_dict() for d in view["attendance"]],
            }
        )
