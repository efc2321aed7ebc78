from __future__ import annotations

from flask import Flask, g

from ..common.http import json_body, ok, token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def api_login():
        data = json_body()
        token = container.auth_service.login(data.get("username", ""), data.get("password", ""))
        return ok(token)

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    @token_required(container)
    def api_me():
        user = g.current_user
        return ok({"user_id": user.user_id, "full_name": user.full_name, "role": user.role.value})
