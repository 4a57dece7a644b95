from __future__ import annotations

from decimal import Decimal

from dealer_desk.domain.errors import InvalidTermError

MONTHS_PER_YEAR = Decimal("12")
PERCENT = Decimal("100")


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    return annual_rate_percent / PERCENT / MONTHS_PER_YEAR


def compute_monthly_payment(
    principal: Decimal,
    annual_rate_percent: Decimal,
    term_months: int,
) -> Decimal:
    """
    Level payment for a fully amortizing loan, at full Decimal precision.

    principal may be negative (trade equity and down payment exceed the
    price); the result is then negative too and the caller decides how to
    present it. Rounding is left to the caller.

    Raises:
        InvalidTermError: If term_months is not an integer >= 1
    """
    if isinstance(term_months, bool) or not isinstance(term_months, int) or term_months < 1:
        raise InvalidTermError(term_months)

    rate = monthly_rate(annual_rate_percent)

    if rate == 0:
        return principal / Decimal(term_months)

    # payment = P * r / (1 - (1 + r)^-n)
    discount = (Decimal("1") + rate) ** -term_months
    return principal * rate / (Decimal("1") - discount)
