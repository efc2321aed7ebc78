from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok, token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/workdays/<int:year>/<int:month>", methods=["PUT"], endpoint="api_set_workdays")
    @token_required(container, admin=True)
    def api_set_workdays(year: int, month: int):
        data = json_body()
        days = container.workday_service.set_working_days(
            year=year, month=month, working_days=data.get("working_days")
        )
        return ok({"year": year, "month": month, "working_days": days})

    @app.route("/api/workdays/<int:year>/<int:month>", methods=["GET"], endpoint="api_get_workdays")
    @token_required(container)
    def api_get_workdays(year: int, month: int):
        days = container.workday_service.require_working_days(year=year, month=month)
        return ok({"year": year, "month": month, "working_days": days})
