"""Tests for the release (alembic) and dev schema bootstrap scripts."""
import pytest
from sqlalchemy import create_engine, inspect, text

from scripts import init_db
from scripts.release import run_release


def _columns(db_url: str) -> set[str]:
    engine = create_engine(db_url)
    try:
        return {c["name"] for c in inspect(engine).get_columns("customers")}
    finally:
        engine.dispose()


EXPECTED_COLUMNS = {"customer_id", "customer_name", "address", "phone", "email", "purchase_value", "order_id"}


def test_release_requires_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        run_release()


def test_release_refuses_sqlite_in_production(monkeypatch, tmp_path):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'prod.db'}")
    with pytest.raises(RuntimeError, match="sqlite"):
        run_release()


def test_release_migrates_to_head(monkeypatch, tmp_path):
    db_url = f"sqlite:///{tmp_path/'release.db'}"
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("DATABASE_URL", db_url)

    run_release()
    assert _columns(db_url) == EXPECTED_COLUMNS

    # Running again is a no-op.
    run_release()
    engine = create_engine(db_url)
    try:
        with engine.connect() as conn:
            assert conn.execute(text("SELECT version_num FROM alembic_version")).scalar() == "5a1e3c9d7b20"
    finally:
        engine.dispose()


def test_migrated_table_assigns_ids_from_one(monkeypatch, tmp_path):
    db_url = f"sqlite:///{tmp_path/'ids.db'}"
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("DATABASE_URL", db_url)
    run_release()

    engine = create_engine(db_url)
    try:
        with engine.begin() as conn:
            conn.execute(text("INSERT INTO customers (customer_name) VALUES ('a'), ('b')"))
            ids = [r[0] for r in conn.execute(text("SELECT customer_id FROM customers ORDER BY customer_id"))]
    finally:
        engine.dispose()
    assert ids == [1, 2]


def test_init_db_create_and_seed_is_idempotent(tmp_path):
    db_url = f"sqlite:///{tmp_path/'dev.db'}"
    init_db.create_tables(database_url=db_url)
    assert _columns(db_url) == EXPECTED_COLUMNS

    assert init_db.seed_only(database_url=db_url) is True
    assert init_db.seed_only(database_url=db_url) is False

    engine = create_engine(db_url)
    try:
        with engine.connect() as conn:
            rows = conn.execute(text("SELECT customer_id, customer_name, order_id FROM customers")).all()
    finally:
        engine.dispose()
    assert [tuple(r) for r in rows] == [(1, "John Doe", 101)]


def test_init_db_main_creates_and_seeds_from_env(monkeypatch, tmp_path):
    db_url = f"sqlite:///{tmp_path/'cli.db'}"
    monkeypatch.setenv("DATABASE_URL", db_url)
    init_db.main(["--seed"])
    init_db.main(["--seed"])

    engine = create_engine(db_url)
    try:
        with engine.connect() as conn:
            assert conn.execute(text("SELECT count(*) FROM customers")).scalar() == 1
    finally:
        engine.dispose()
