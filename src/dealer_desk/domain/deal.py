from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from dealer_desk.domain.amortization import compute_monthly_payment
from dealer_desk.domain.appraisal import Appraisal
from dealer_desk.domain.errors import InvalidInputError
from dealer_desk.domain.lifecycle import DealLifecycle, DealStatus
from dealer_desk.domain.money import ZERO, to_cents

DEFAULT_TERM_MONTHS = 60


@dataclass(frozen=True, slots=True)
class DealInput:
    """Raw pencil inputs as entered on the desk."""

    sale_price: Decimal
    down_payment: Decimal = ZERO
    trade_in_value: Decimal = ZERO
    term_months: int = DEFAULT_TERM_MONTHS
    apr: Decimal = ZERO
    appraisal: Appraisal | None = None

    def validate(self) -> None:
        if self.sale_price is None or self.sale_price <= 0:
            raise InvalidInputError("sale_price", "must be > 0")
        if self.down_payment < 0:
            raise InvalidInputError("down_payment", "must be >= 0")
        # an attached appraisal replaces the manual figure, negative or not
        if self.appraisal is None and self.trade_in_value < 0:
            raise InvalidInputError("trade_in_value", "must be >= 0")
        if self.apr < 0:
            raise InvalidInputError("apr", "must be >= 0")
        if (
            isinstance(self.term_months, bool)
            or not isinstance(self.term_months, int)
            or self.term_months < 1
        ):
            raise InvalidInputError("term_months", "must be an integer >= 1")
        if self.appraisal is not None:
            self.appraisal.validate()


@dataclass(frozen=True, slots=True)
class DealStructure:
    """
    A computed pencil. Immutable; rebuild it whenever an input changes.

    principal and final_acv keep full precision; payment figures are
    already rounded to cents.
    """

    sale_price: Decimal
    down_payment: Decimal
    trade_in_value: Decimal
    term_months: int
    apr: Decimal
    principal: Decimal
    monthly_payment: Decimal
    total_of_payments: Decimal
    finance_charge: Decimal
    final_acv: Decimal | None = None

    @property
    def has_negative_equity(self) -> bool:
        return self.trade_in_value < 0

    @property
    def is_overpaid(self) -> bool:
        """Down payment and trade equity already cover the sale price."""
        return self.principal < 0


def build_structure(deal_input: DealInput) -> DealStructure:
    """
    Compute a consistent pencil from raw inputs.

    Rounding policy:
    - principal, ACV and the payment are computed at full Decimal precision
    - monthly_payment is rounded to cents with ROUND_HALF_UP
    - total_of_payments and finance_charge are derived from the unrounded
      payment and rounded once

    When an appraisal is attached its final ACV is the trade value used in
    the math, overriding any manually entered trade_in_value.

    Raises:
        InvalidInputError: If a required input is missing or out of range
    """
    deal_input.validate()

    final_acv: Decimal | None = None
    trade_in_value = deal_input.trade_in_value
    if deal_input.appraisal is not None:
        final_acv = deal_input.appraisal.final_acv
        trade_in_value = final_acv

    principal = deal_input.sale_price - deal_input.down_payment - trade_in_value

    payment = compute_monthly_payment(principal, deal_input.apr, deal_input.term_months)
    total_of_payments = payment * Decimal(deal_input.term_months)

    return DealStructure(
        sale_price=deal_input.sale_price,
        down_payment=deal_input.down_payment,
        trade_in_value=trade_in_value,
        term_months=deal_input.term_months,
        apr=deal_input.apr,
        principal=principal,
        monthly_payment=to_cents(payment),
        total_of_payments=to_cents(total_of_payments),
        finance_charge=to_cents(total_of_payments - principal),
        final_acv=final_acv,
    )


@dataclass(frozen=True, slots=True)
class Stipulations:
    """Paperwork checklist for human review. Never gates a status change."""

    id_verified: bool = False
    video_sent: bool = False
    insurance_proof: bool = False
    credit_consent: bool = False

    def outstanding(self) -> list[str]:
        return [
            name
            for name in ("id_verified", "video_sent", "insurance_proof", "credit_consent")
            if not getattr(self, name)
        ]

    @property
    def is_complete(self) -> bool:
        return not self.outstanding()


@dataclass(frozen=True, slots=True)
class Deal:
    id: str
    customer_id: str
    vehicle_id: str
    salesperson_id: str
    structure: DealStructure
    appraisal: Appraisal | None = None
    stipulations: Stipulations = field(default_factory=Stipulations)
    status: DealStatus = DealStatus.PENDING
    lender_id: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    # Bumped by the repository on every save; a stale version is rejected
    version: int = 0

    @property
    def lifecycle(self) -> DealLifecycle:
        return DealLifecycle(deal_id=self.id, status=self.status)
