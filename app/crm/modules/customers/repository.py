from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy import delete, select, update
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.crm.db import ping
from app.crm.errors import StorageUnavailable
from app.crm.modules.customers.models import CustomerRow
from app.crm.modules.customers.records import Customer, record_to_columns, row_to_record

logger = logging.getLogger(__name__)


class CustomerRepository:
    """
    Storage gateway for the `customers` table.

    Holds no per-request state: `session_provider` is called on every operation
    (in the app it is `db_session`, which returns the request-scoped session).
    Each write commits on its own; there is no cross-call transaction.
    """

    def __init__(self, session_provider: Callable[[], Session]) -> None:
        self._session_provider = session_provider

    @contextmanager
    def _session(self) -> Iterator[Session]:
        s = self._session_provider()
        try:
            yield s
        except (OperationalError, InterfaceError) as e:
            s.rollback()
            logger.error("Customer store unreachable: %s", e.orig if e.orig is not None else e)
            raise StorageUnavailable("customer store is unavailable") from e

    def insert(self, record: Customer) -> Customer:
        with self._session() as s:
            row = CustomerRow(**record_to_columns(record))
            s.add(row)
            s.flush()
            s.commit()
            return row_to_record(row)

    def find_all(self) -> list[Customer]:
        with self._session() as s:
            rows = s.scalars(select(CustomerRow).order_by(CustomerRow.customer_id)).all()
            return [row_to_record(r) for r in rows]

    def find_by_id(self, customer_id: int) -> Customer | None:
        with self._session() as s:
            row = s.execute(
                select(CustomerRow).where(CustomerRow.customer_id == customer_id)
            ).scalar_one_or_none()
            return row_to_record(row) if row is not None else None

    def update(self, record: Customer) -> bool:
        """
        Overwrite every non-key column of the row keyed by `record.customer_id`.
        A missing row is left missing (no upsert); returns whether a row matched.
        """
        if record.customer_id is None:
            raise ValueError("update requires a customer_id")
        with self._session() as s:
            result = s.execute(
                update(CustomerRow)
                .where(CustomerRow.customer_id == record.customer_id)
                .values(**record_to_columns(record))
                .execution_options(synchronize_session=False)
            )
            s.commit()
            # Drop any stale copy of this row held in the session's identity map.
            s.expire_all()
            matched = (result.rowcount or 0) > 0
            if not matched:
                logger.warning("update on missing customer id=%s was a no-op", record.customer_id)
            return matched

    def delete_by_id(self, customer_id: int) -> None:
        with self._session() as s:
            s.execute(
                delete(CustomerRow)
                .where(CustomerRow.customer_id == customer_id)
                .execution_options(synchronize_session=False)
            )
            s.commit()

    def ping(self) -> bool:
        """Cheap liveness check for the health endpoint. Never raises."""
        try:
            with self._session() as s:
                ping(s)
                s.rollback()
            return True
        except (StorageUnavailable, SQLAlchemyError):
            return False
