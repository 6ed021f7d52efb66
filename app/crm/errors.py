from __future__ import annotations

from datetime import datetime, timezone
from http import HTTPStatus

from flask import Flask, current_app, g, jsonify, request
from werkzeug.exceptions import BadRequest, HTTPException

__all__ = [
    "BadRequest",
    "StorageUnavailable",
    "UpdateTargetMissing",
    "error_body",
    "register_error_handlers",
]


class StorageUnavailable(RuntimeError):
    pass


class UpdateTargetMissing(LookupError):
    def __init__(self, customer_id: int) -> None:
        super().__init__(f"Customer not found: {customer_id}")
        self.customer_id = customer_id


def error_body(status: int) -> dict:
    """
    Uniform error envelope: what failed and where, never why.
    """
    try:
        phrase = HTTPStatus(status).phrase
    except ValueError:
        phrase = "Error"
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status,
        "error": phrase,
        "path": request.path,
    }


def _error_response(status: int, headers=None):
    resp = jsonify(error_body(status))
    resp.status_code = status
    for name, value in headers or ():
        if name.lower() != "content-type":
            resp.headers[name] = value
    return resp


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def _err_http(e: HTTPException):  # type: ignore[no-redef]
        status = e.code or 500
        if status >= 500:
            app.logger.error("HTTP %s on %s %s (request_id=%s)", status, request.method, request.path, getattr(g, "request_id", None))
        return _error_response(status, e.get_headers())

    @app.errorhandler(UpdateTargetMissing)
    def _err_update_missing(e: UpdateTargetMissing):  # type: ignore[no-redef]
        if current_app.config.get("UPDATE_MISSING_AS_404"):
            app.logger.info("PUT on missing customer id=%s -> 404", e.customer_id)
            return _error_response(404)
        app.logger.exception("Update target missing (id=%s request_id=%s)", e.customer_id, getattr(g, "request_id", None))
        return _error_response(500)

    @app.errorhandler(StorageUnavailable)
    def _err_storage(e: StorageUnavailable):  # type: ignore[no-redef]
        app.logger.error("Storage unavailable (request_id=%s): %s", getattr(g, "request_id", None), e)
        return _error_response(500)

    @app.errorhandler(Exception)
    def _err_500(e: Exception):  # type: ignore[no-redef]
        app.logger.exception("Unhandled 500 (request_id=%s)", getattr(g, "request_id", None))
        return _error_response(500)
