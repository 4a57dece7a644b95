"""Lease quote engine.

Lease figures are exposed in whole currency units, loan figures in cents.
That difference is a product convention and is kept on purpose.

Net cap cost is never floored (a trade can exceed the cap cost), but the
depreciation component is: a negative depreciation is not a meaningful part
of a lease payment.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from dealer_desk.domain.errors import InvalidInputError, InvalidTermError
from dealer_desk.domain.money import ZERO, to_cents, to_whole

# Money factors above this are read as the "times 2400" APR-style figure
# (3.00 -> 0.00125). Heuristic: a mis-keyed raw factor above 1 is misread.
MONEY_FACTOR_THRESHOLD = Decimal("1")
MONEY_FACTOR_DIVISOR = Decimal("2400")

DEFAULT_RESIDUAL_PERCENT = Decimal("50")


def normalize_money_factor(money_factor: Decimal) -> Decimal:
    if money_factor > MONEY_FACTOR_THRESHOLD:
        return money_factor / MONEY_FACTOR_DIVISOR
    return money_factor


@dataclass(frozen=True, slots=True)
class LeaseQuoteInput:
    msrp: Decimal | None
    cap_cost: Decimal | None
    money_factor: Decimal | None
    residual_percent: Decimal | None = None
    residual_percents: Mapping[int, Decimal] = field(default_factory=dict)
    term: int | None = None
    down_payment: Decimal = ZERO
    sales_tax_rate: Decimal = ZERO
    trade_in_value: Decimal = ZERO
    year: int | None = None
    make: str | None = None
    model: str | None = None

    @property
    def vehicle_label(self) -> str:
        parts = [str(p).strip() for p in (self.year, self.make, self.model) if p]
        return " ".join(p for p in parts if p) or "Vehicle"

    def residual_percent_for(self, term: int) -> Decimal:
        return self.residual_percents.get(term) or DEFAULT_RESIDUAL_PERCENT

    def validate_common(self) -> None:
        for name in ("msrp", "cap_cost", "money_factor"):
            value = getattr(self, name)
            if value is None or value == 0:
                raise InvalidInputError(name, "is required", code="MISSING_FIELD")


@dataclass(frozen=True, slots=True)
class LeaseQuote:
    term: int
    monthly_payment: Decimal
    residual_value: Decimal
    total_interest: Decimal
    depreciation: Decimal
    rent_charge: Decimal
    tax: Decimal
    net_cap_cost: Decimal


@dataclass(frozen=True, slots=True)
class LeaseComparison:
    vehicle_label: str
    options: list[LeaseQuote]


def _quote_term(lease: LeaseQuoteInput, term: int, residual_percent: Decimal) -> LeaseQuote:
    money_factor = normalize_money_factor(lease.money_factor)
    months = Decimal(term)

    residual_value = lease.msrp * (residual_percent / Decimal("100"))
    net_cap_cost = lease.cap_cost - lease.down_payment - lease.trade_in_value

    depreciation = max(ZERO, (net_cap_cost - residual_value) / months)
    rent_charge = (net_cap_cost + residual_value) * money_factor
    tax = (depreciation + rent_charge) * (lease.sales_tax_rate / Decimal("100"))
    payment = depreciation + rent_charge + tax

    return LeaseQuote(
        term=term,
        monthly_payment=to_whole(payment),
        residual_value=to_whole(residual_value),
        total_interest=to_whole(rent_charge * months),
        depreciation=to_whole(depreciation),
        rent_charge=to_cents(rent_charge),
        tax=to_cents(tax),
        net_cap_cost=to_cents(net_cap_cost),
    )


def _check_term(term: object, field_name: str) -> int:
    if isinstance(term, bool) or not isinstance(term, int) or term < 1:
        raise InvalidTermError(term, field=field_name)
    return term


def quote_lease(lease: LeaseQuoteInput) -> LeaseQuote:
    """
    Single-term lease quote.

    Raises:
        InvalidInputError: If msrp, cap_cost, residual_percent, money_factor
            or term is missing or zero
    """
    lease.validate_common()
    if lease.residual_percent is None or lease.residual_percent == 0:
        raise InvalidInputError("residual_percent", "is required", code="MISSING_FIELD")
    if lease.term is None or lease.term == 0:
        raise InvalidInputError("term", "is required", code="MISSING_FIELD")
    term = _check_term(lease.term, "term")

    return _quote_term(lease, term, lease.residual_percent)


def compare_terms(lease: LeaseQuoteInput, terms: Sequence[int]) -> LeaseComparison:
    """
    Quote the same vehicle over several terms, one option per requested term
    in request order. Residuals come from residual_percents (default 50%).

    Raises:
        InvalidInputError: If terms is empty or not a sequence, or a common
            lease field is missing
    """
    if isinstance(terms, (str, bytes)) or not isinstance(terms, Sequence) or not terms:
        raise InvalidInputError("terms", "must be a non-empty list of months")
    lease.validate_common()

    options = []
    for index, term in enumerate(terms):
        term = _check_term(term, f"terms.{index}")
        options.append(_quote_term(lease, term, lease.residual_percent_for(term)))

    return LeaseComparison(vehicle_label=lease.vehicle_label, options=options)
