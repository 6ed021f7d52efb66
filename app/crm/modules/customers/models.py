from __future__ import annotations

from sqlalchemy import BigInteger, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.crm.models import Base

# BIGINT identity on Postgres; sqlite only autoincrements an INTEGER PRIMARY KEY.
CustomerIdType = BigInteger().with_variant(Integer, "sqlite")


class CustomerRow(Base):
    """
    Persisted customer. Every column except the key is nullable and unconstrained;
    order_id is a plain scalar, not a foreign key.
    """

    __tablename__ = "customers"

    customer_id: Mapped[int] = mapped_column(CustomerIdType, primary_key=True, autoincrement=True)

    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    purchase_value: Mapped[float | None] = mapped_column(Float(precision=53), nullable=True)
    order_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
