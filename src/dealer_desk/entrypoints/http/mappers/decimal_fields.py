from __future__ import annotations

from decimal import Decimal, InvalidOperation

from dealer_desk.domain.errors import ValidationError

# Largest magnitude the money columns (NUMERIC(12,2)) can hold
MAX_MAGNITUDE = Decimal("1E10")


class DecimalFieldParser:
    """
    Converts decimal strings at the HTTP boundary, collecting every bad
    field so one ValidationError reports them all.
    """

    def __init__(self) -> None:
        self.errors: list[dict[str, str]] = []

    def parse(self, field: str, raw: str | float | int | None) -> Decimal | None:
        if raw is None:
            return None
        try:
            # str() first so floats keep their printed value, not their binary one
            value = Decimal(str(raw).strip())
        except (InvalidOperation, ValueError):
            value = None
        if value is None or not value.is_finite():
            self._fail(field, f"Must be a valid decimal: {raw}", "INVALID_DECIMAL")
            return Decimal("0")  # Placeholder to continue validation
        if abs(value) >= MAX_MAGNITUDE:
            self._fail(field, f"Must be less than {MAX_MAGNITUDE:f} in magnitude", "OUT_OF_RANGE")
            return Decimal("0")
        return value

    def _fail(self, field: str, message: str, code: str) -> None:
        self.errors.append({"field": field, "message": message, "code": code})

    def raise_if_errors(self) -> None:
        if self.errors:
            raise ValidationError(errors=self.errors)
