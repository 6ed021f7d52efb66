"""
Local/dev schema bootstrap (bypasses alembic).

Usage:
  python scripts/init_db.py           # create missing tables
  python scripts/init_db.py --seed    # ...and insert the example customer if the table is empty
"""

import argparse
import os
import sys
from pathlib import Path

from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

# Ensure repo root is on sys.path when running as a script (Windows-friendly).
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.crm.models import Base, CustomerRow  # noqa: E402
from app.crm.config import normalize_database_url  # noqa: E402

EXAMPLE_CUSTOMER = {
    "customer_name": "John Doe",
    "address": "NYC",
    "phone": "9876543210",
    "email": "john@example.com",
    "purchase_value": 500.75,
    "order_id": 101,
}


def _resolve_url(database_url: str | None) -> str:
    return (database_url or os.environ.get("DATABASE_URL") or "sqlite:///customers.db").strip()


def _customers_engine(db_url: str) -> Engine:
    return create_engine(normalize_database_url(db_url), future=True, pool_pre_ping=True)


def create_tables(*, database_url: str | None = None) -> str:
    db_url = _resolve_url(database_url)
    engine = _customers_engine(db_url)
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()
    return db_url


def seed_only(*, database_url: str | None = None) -> bool:
    """
    Insert the example customer when the table is empty (idempotent).
    Returns True if a row was inserted.
    """
    engine = _customers_engine(_resolve_url(database_url))
    try:
        with Session(engine) as s, s.begin():
            count = s.scalar(select(func.count()).select_from(CustomerRow)) or 0
            if count:
                print(f"customers table already has {count} row(s); not seeding.")
                return False
            s.add(CustomerRow(**EXAMPLE_CUSTOMER))
    finally:
        engine.dispose()
    print("Seeded example customer.")
    return True


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create the customers schema directly (dev only).")
    parser.add_argument("--seed", action="store_true", help="insert an example customer into an empty table")
    args = parser.parse_args(argv)

    db_url = create_tables()
    print(f"Initialized database schema ({db_url.split('@')[-1]}).")
    if args.seed:
        seed_only(database_url=db_url)


if __name__ == "__main__":
    main()
