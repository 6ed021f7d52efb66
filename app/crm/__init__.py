import logging
import os

from flask import Flask
from dotenv import load_dotenv

from app.crm.models import Base  # noqa: F401  (registers all tables on Base.metadata)
from app.crm.config import load_config
from app.crm.db import create_schema, db_session, init_db, teardown_db_session
from app.crm.errors import register_error_handlers
from app.crm.logging_setup import configure_logging, install_request_id
from app.crm.metrics import init_metrics
from app.crm.routes import bp as routes_bp, build_management_blueprint
from app.crm.modules.customers.api import CustomerResource, build_blueprint as build_customers_blueprint
from app.crm.modules.customers.repository import CustomerRepository
from app.crm.modules.customers.service import CustomerService


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__, template_folder="templates")
    app.config.from_mapping(load_config())
    app.json.sort_keys = False  # keep customerId first, fields in declared order

    configure_logging(app.config["LOG_LEVEL"])

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not (os.environ.get("DATABASE_URL") or "").strip():
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose(close=False)
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    if app.config.get("AUTO_CREATE_SCHEMA"):
        create_schema(app)
        app.logger.info("Schema ensured via create_all (AUTO_CREATE_SCHEMA)")

    install_request_id(app)
    init_metrics(app)

    # Explicit object graph: one repository, one service, one resource per app.
    repository = CustomerRepository(db_session)
    service = CustomerService(repository)
    resource = CustomerResource(service)

    app.register_blueprint(routes_bp)
    app.register_blueprint(build_management_blueprint(repository, app.config["MANAGEMENT_ENDPOINTS"]))
    app.register_blueprint(build_customers_blueprint(resource))

    app.teardown_appcontext(teardown_db_session)
    register_error_handlers(app)

    logging.getLogger(__name__).info(
        "create_app() complete; app ready to serve (env=%s endpoints=%s)",
        app.config["ENV"],
        ",".join(app.config["MANAGEMENT_ENDPOINTS"]),
    )

    return app
