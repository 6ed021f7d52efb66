"""
Customer business layer.

Everything here forwards straight to the repository; it is the seam where
rules would go. The one non-trivial contract is `update_by_id`, which is
read-modify-write: fetch, overwrite every mutable field, save. An unknown id
is an error, never an implicit create.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.crm.errors import UpdateTargetMissing
from app.crm.modules.customers.records import Customer, copy_mutable_fields

if TYPE_CHECKING:
    from app.crm.modules.customers.repository import CustomerRepository

logger = logging.getLogger(__name__)


class CustomerService:
    def __init__(self, repository: "CustomerRepository") -> None:
        self.repository = repository

    def save(self, record: Customer) -> Customer:
        """
        Insert when the record has no id, otherwise overwrite the stored row.
        Overwriting a row that is not there raises UpdateTargetMissing.
        """
        if record.customer_id is None:
            saved = self.repository.insert(record)
            logger.info("customer.create id=%s", saved.customer_id)
            return saved
        if not self.repository.update(record):
            raise UpdateTargetMissing(record.customer_id)
        logger.info("customer.update id=%s", record.customer_id)
        return record

    def get_all(self) -> list[Customer]:
        return self.repository.find_all()

    def get_by_id(self, customer_id: int) -> Customer | None:
        return self.repository.find_by_id(customer_id)

    def delete_by_id(self, customer_id: int) -> None:
        self.repository.delete_by_id(customer_id)
        logger.info("customer.delete id=%s", customer_id)

    def update_by_id(self, customer_id: int, changes: Customer) -> Customer:
        existing = self.get_by_id(customer_id)
        if existing is None:
            raise UpdateTargetMissing(customer_id)
        return self.save(copy_mutable_fields(existing, changes))
