from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")
WHOLE = Decimal("1")
ZERO = Decimal("0")


def _round(amount: Decimal, exponent: Decimal) -> Decimal:
    rounded = amount.quantize(exponent, rounding=ROUND_HALF_UP)
    # -0.00 from tiny negative residues reads as a refund; report plain zero
    return abs(rounded) if rounded == 0 else rounded


def to_cents(amount: Decimal) -> Decimal:
    """Round to 2 decimal places. Loan figures are exposed at this precision."""
    return _round(amount, CENTS)


def to_whole(amount: Decimal) -> Decimal:
    """Round to whole currency units. Lease figures are exposed at this precision."""
    return _round(amount, WHOLE)
