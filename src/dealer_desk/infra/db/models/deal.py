from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from dealer_desk.infra.db.models.base import Base


class DealRow(Base):
    """
    One penciled deal.

    Raw inputs and derived figures are stored side by side so a deal reads
    back exactly as it was quoted, even if the payment math changes later.

    Inputs are NUMERIC(12,2), matching the largest amount the API accepts.
    Derived figures (payments, interest, an ACV with stacked credits) can
    outgrow the inputs and are NUMERIC(18,2).
    """

    __tablename__ = "deals"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    customer_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    vehicle_id: Mapped[str] = mapped_column(String(64), nullable=False)
    salesperson_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    lender_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, server_default="pending")

    # Structure inputs
    sale_price: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    down_payment: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    trade_in_value: Mapped[Decimal] = mapped_column(Numeric(precision=18, scale=2), nullable=False)
    term_months: Mapped[int] = mapped_column(Integer, nullable=False)
    apr: Mapped[Decimal] = mapped_column(Numeric(precision=6, scale=3), nullable=False)

    # Derived figures
    principal: Mapped[Decimal] = mapped_column(Numeric(precision=18, scale=2), nullable=False)
    monthly_payment: Mapped[Decimal] = mapped_column(Numeric(precision=18, scale=2), nullable=False)
    total_of_payments: Mapped[Decimal] = mapped_column(Numeric(precision=18, scale=2), nullable=False)
    finance_charge: Mapped[Decimal] = mapped_column(Numeric(precision=18, scale=2), nullable=False)

    # Trade-in appraisal
    appraisal_vin: Mapped[str | None] = mapped_column(String(17), nullable=True)
    appraisal_base_value: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=12, scale=2), nullable=True
    )
    appraisal_deductions: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    appraisal_final_acv: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=18, scale=2), nullable=True
    )

    # Stipulations
    id_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    video_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    insurance_proof: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    credit_consent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Optimistic lock: SQLAlchemy adds "AND version = :old" to every UPDATE
    version: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __mapper_args__ = {"version_id_col": version}
