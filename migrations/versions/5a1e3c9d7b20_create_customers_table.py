"""create customers table

Revision ID: 5a1e3c9d7b20
Revises:
Create Date: 2026-10-17 09:12:44.180231

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5a1e3c9d7b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the customers table (identity key, every other column nullable)."""
    # Check if table already exists (idempotent; dev DBs may have been created via create_all)
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    if "customers" in set(inspector.get_table_names()):
        return

    op.create_table(
        "customers",
        sa.Column(
            "customer_id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        sa.Column("customer_name", sa.String(255), nullable=True),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("purchase_value", sa.Float(precision=53), nullable=True),
        sa.Column("order_id", sa.BigInteger(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("customers")
