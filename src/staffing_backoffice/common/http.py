from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AggregationCancelledError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicateInvoiceError,
    InvalidInputError,
    MissingAttendanceError,
    NotFoundError,
    PersistenceError,
    RenderingOrStorageError,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses before their bases.
_STATUS_BY_ERROR = (
    (InvalidInputError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (MissingAttendanceError, 404),
    (DuplicateInvoiceError, 409),
    (AggregationCancelledError, 409),
    (PersistenceError, 500),
    (RenderingOrStorageError, 500),
)


def status_for(exc: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return status
    return 500


def error_response(exc: DomainError):
    status = status_for(exc)
    if status >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.path, exc)
    body = {"success": False, "error": type(exc).__name__, "message": str(exc)}
    if isinstance(exc, MissingAttendanceError):
        body["job_id"] = exc.job_id
    return jsonify(body), status


def ok(payload=None, status: int = 200, **extra):
    body = {"success": True}
    if payload is not None:
        body["data"] = payload
    body.update(extra)
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return dict(request.form)
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return data


def unexpected_error_response(exc: Exception):
    if isinstance(exc, HTTPException):
        return jsonify({"success": False, "error": exc.name, "message": exc.description}), exc.code
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({"success": False, "error": "InternalError", "message": "Internal server error"}), 500


def register_error_handlers(app: Flask) -> None:
    app.register_error_handler(DomainError, error_response)
    app.register_error_handler(Exception, unexpected_error_response)


def token_required(container, *, admin: bool = False):
    """Resolve the bearer token into g.current_user before running the view."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            header = request.headers.get("Authorization", "")
            scheme, _, token = header.partition(" ")
            if scheme.lower() != "bearer" or not token.strip():
                return error_response(AuthenticationError("Missing bearer token"))

            user = container.auth_service.current_user(token.strip())
            if admin:
                container.auth_service.require_admin(user)
            g.current_user = user
            return view(*args, **kwargs)

        return wrapper

    return decorator
