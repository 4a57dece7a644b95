"""Add deal version and widen derived money

Revision ID: 7f4b2c9e61d8
Revises: 3c1e9b7d2a40
Create Date: 2026-10-17 15:02:37.540913

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "7f4b2c9e61d8"
down_revision: Union[str, Sequence[str], None] = "3c1e9b7d2a40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DERIVED_COLUMNS = (
    "trade_in_value",
    "principal",
    "monthly_payment",
    "total_of_payments",
    "finance_charge",
    "appraisal_final_acv",
)


def upgrade() -> None:
    """Upgrade schema."""
    # Existing rows start at version 1
    op.add_column(
        "deals",
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    )
    for column in DERIVED_COLUMNS:
        op.alter_column(
            "deals",
            column,
            type_=sa.Numeric(precision=18, scale=2),
            existing_type=sa.Numeric(precision=12, scale=2),
        )


def downgrade() -> None:
    """Downgrade schema."""
    for column in DERIVED_COLUMNS:
        op.alter_column(
            "deals",
            column,
            type_=sa.Numeric(precision=12, scale=2),
            existing_type=sa.Numeric(precision=18, scale=2),
        )
    op.drop_column("deals", "version")
