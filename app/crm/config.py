import os
from dataclasses import dataclass

from app.crm.constants import APP_VERSION, DEFAULT_MANAGEMENT_ENDPOINTS, MANAGEMENT_ENDPOINTS


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    log_level: str

    app_name: str
    app_version: str
    management_endpoints: tuple[str, ...]

    update_missing_as_404: bool
    auto_create_schema: bool


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getflag(name: str, default: bool = False) -> bool:
    raw = _getenv(name)
    if not raw:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


def normalize_database_url(url: str) -> str:
    """
    Managed Postgres providers hand out `postgres://` URLs; SQLAlchemy 2.x only
    understands `postgresql://`, and we want the psycopg (v3) driver.
    """
    if url.startswith("postgres://"):
        return "postgresql+psycopg://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        return "postgresql+psycopg://" + url[len("postgresql://"):]
    return url


def parse_management_endpoints(raw: str) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_MANAGEMENT_ENDPOINTS
    names = [p.strip().lower() for p in raw.split(",") if p.strip()]
    unknown = [n for n in names if n not in MANAGEMENT_ENDPOINTS]
    if unknown:
        raise ValueError(f"Unknown MANAGEMENT_ENDPOINTS entries: {', '.join(unknown)}")
    return tuple(n for n in MANAGEMENT_ENDPOINTS if n in names)


def load_settings() -> Settings:
    env = _getenv("ENV", "development")
    database_url = normalize_database_url(_getenv("DATABASE_URL", "sqlite:///customers.db"))
    is_production = env.lower() in ("prod", "production")
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=env,
        database_url=database_url,
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        app_name=_getenv("APP_NAME", "customer-service"),
        app_version=_getenv("APP_VERSION", APP_VERSION),
        management_endpoints=parse_management_endpoints(_getenv("MANAGEMENT_ENDPOINTS")),
        update_missing_as_404=_getflag("UPDATE_MISSING_AS_404"),
        # Local sqlite databases get their schema created on boot; everything else goes through alembic.
        auto_create_schema=_getflag(
            "AUTO_CREATE_SCHEMA",
            default=database_url.startswith("sqlite") and not is_production,
        ),
    )


def load_config() -> dict:
    s = load_settings()
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        "APP_NAME": s.app_name,
        "APP_VERSION": s.app_version,
        "MANAGEMENT_ENDPOINTS": s.management_endpoints,
        "UPDATE_MISSING_AS_404": s.update_missing_as_404,
        "AUTO_CREATE_SCHEMA": s.auto_create_schema,
    }
