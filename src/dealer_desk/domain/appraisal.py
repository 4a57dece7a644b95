from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from dealer_desk.domain.errors import InvalidInputError


@dataclass(frozen=True, slots=True)
class Deduction:
    """Reconditioning or damage cost taken off the trade's base value."""

    label: str
    cost: Decimal


@dataclass(frozen=True, slots=True)
class Appraisal:
    """Trade-in appraisal attached to a deal.

    final_acv is derived, never supplied.
    """

    base_value: Decimal
    deductions: tuple[Deduction, ...] = field(default_factory=tuple)
    vin: str | None = None

    def __post_init__(self) -> None:
        if self.vin is not None:
            object.__setattr__(self, "vin", self.vin.strip().upper())
        object.__setattr__(self, "deductions", tuple(self.deductions))

    def validate(self) -> None:
        if self.base_value < 0:
            raise InvalidInputError("appraisal.base_value", "must be >= 0")

    @property
    def total_deductions(self) -> Decimal:
        return sum((d.cost for d in self.deductions), Decimal("0"))

    @property
    def final_acv(self) -> Decimal:
        return compute_acv(self.base_value, self.deductions)


def compute_acv(base_value: Decimal, deductions: Iterable[Deduction]) -> Decimal:
    """
    Actual cash value: base value minus every itemized deduction.

    Not floored at zero. A heavily damaged trade yields a negative ACV,
    which must reach the deal math as negative equity.
    """
    total = sum((d.cost for d in deductions), Decimal("0"))
    return base_value - total
