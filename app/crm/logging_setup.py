"""
Logging configuration for the customer service.
"""

from __future__ import annotations

import logging
import sys
import uuid

from flask import Flask, g, request

from app.crm.constants import REQUEST_ID_HEADER

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Single stdout handler on the root logger (gunicorn/DO capture stdout)."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid adding the handler twice when create_app() runs more than once per process.
    if not any(getattr(h, "_crm_console", False) for h in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        console_handler._crm_console = True  # type: ignore[attr-defined]
        root_logger.addHandler(console_handler)

    # SQL echo stays off unless explicitly asked for.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def install_request_id(app: Flask) -> None:
    """
    Per-request id for log correlation: taken from X-Request-ID when the caller
    sends one, otherwise generated. Echoed back on the response.
    """

    @app.before_request
    def _assign_request_id():  # type: ignore[no-redef]
        incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
        g.request_id = incoming[:64] or uuid.uuid4().hex

    @app.after_request
    def _echo_request_id(response):  # type: ignore[no-redef]
        rid = getattr(g, "request_id", None)
        if rid:
            response.headers[REQUEST_ID_HEADER] = rid
        return response
