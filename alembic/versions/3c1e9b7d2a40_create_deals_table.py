"""Create deals table

Revision ID: 3c1e9b7d2a40
Revises:
Create Date: 2026-10-17 10:12:41.118204

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1e9b7d2a40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    money = sa.Numeric(precision=12, scale=2)

    op.create_table(
        "deals",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("customer_id", sa.String(length=64), nullable=False),
        sa.Column("vehicle_id", sa.String(length=64), nullable=False),
        sa.Column("salesperson_id", sa.String(length=64), nullable=False),
        sa.Column("lender_id", sa.String(length=64), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("sale_price", money, nullable=False),
        sa.Column("down_payment", money, nullable=False),
        sa.Column("trade_in_value", money, nullable=False),
        sa.Column("term_months", sa.Integer(), nullable=False),
        sa.Column("apr", sa.Numeric(precision=6, scale=3), nullable=False),
        sa.Column("principal", money, nullable=False),
        sa.Column("monthly_payment", money, nullable=False),
        sa.Column("total_of_payments", money, nullable=False),
        sa.Column("finance_charge", money, nullable=False),
        sa.Column("appraisal_vin", sa.String(length=17), nullable=True),
        sa.Column("appraisal_base_value", money, nullable=True),
        sa.Column("appraisal_deductions", sa.JSON(), nullable=True),
        sa.Column("appraisal_final_acv", money, nullable=True),
        sa.Column("id_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("video_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("insurance_proof", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("credit_consent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text(), nullable=True),
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
    )
    op.create_index("ix_deals_customer_id", "deals", ["customer_id"])
    op.create_index("ix_deals_salesperson_id", "deals", ["salesperson_id"])
    op.create_index("ix_deals_created_at", "deals", ["created_at"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_deals_created_at", table_name="deals")
    op.drop_index("ix_deals_salesperson_id", table_name="deals")
    op.drop_index("ix_deals_customer_id", table_name="deals")
    op.drop_table("deals")
