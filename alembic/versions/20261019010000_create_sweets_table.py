"""Create sweets table with unique name and non-negative price/quantity.

Revision ID: 20261019010000
Revises: 20261019000000
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20261019010000"
down_revision: Union[str, None] = "20261019000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sweets",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=255), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_sweets_name"),
        sa.CheckConstraint("price >= 0", name="ck_sweets_price_non_negative"),
        sa.CheckConstraint("quantity >= 0", name="ck_sweets_quantity_non_negative"),
    )
    op.create_index(op.f("ix_sweets_category"), "sweets", ["category"], unique=False)
    op.create_index(op.f("ix_sweets_created_at"), "sweets", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_sweets_created_at"), table_name="sweets")
    op.drop_index(op.f("ix_sweets_category"), table_name="sweets")
    op.drop_table("sweets")
