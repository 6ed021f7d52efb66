from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Blueprint, current_app, jsonify, render_template, url_for

from app.crm.apidocs import build_openapi

if TYPE_CHECKING:
    from app.crm.modules.customers.repository import CustomerRepository

bp = Blueprint("routes", __name__)


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON."""
    return {"ok": True}


@bp.get("/healthz")
def healthz():
    """
    Fast health check for k8s/DO probes. No DB access, minimal overhead.
    """
    return "ok", 200


def build_management_blueprint(repository: "CustomerRepository", enabled: tuple[str, ...]) -> Blueprint:
    """
    Actuator-style endpoints, each group registered only when listed in
    MANAGEMENT_ENDPOINTS.
    """
    mgmt = Blueprint("management", __name__)

    if "health" in enabled:
        @mgmt.get("/actuator/health")
        def actuator_health():
            db_up = repository.ping()
            status = "UP" if db_up else "DOWN"
            body = {"status": status, "components": {"db": {"status": status}}}
            return jsonify(body), (200 if db_up else 503)

    if "info" in enabled:
        @mgmt.get("/actuator/info")
        def actuator_info():
            cfg = current_app.config
            return {"app": {"name": cfg["APP_NAME"], "version": cfg["APP_VERSION"], "env": cfg["ENV"]}}

    if "metrics" in enabled:
        @mgmt.get("/metrics")
        def metrics():
            return current_app.extensions["metrics"].render()

    if "docs" in enabled:
        @mgmt.get("/v3/api-docs")
        def api_docs():
            cfg = current_app.config
            return jsonify(build_openapi(title=cfg["APP_NAME"], version=cfg["APP_VERSION"]))

        @mgmt.get("/swagger-ui")
        def swagger_ui():
            return render_template(
                "swagger_ui.html",
                title=current_app.config["APP_NAME"],
                spec_url=url_for("management.api_docs"),
            )

    return mgmt
