from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

MONEY_PATTERN = r"^\d{1,10}(\.\d{1,2})?$"
PERCENT_PATTERN = r"^\d{1,3}(\.\d{1,4})?$"
MAX_LEASE_TERM = 120
MAX_COMPARE_TERMS = 12


class LeaseTermsBaseDTO(BaseModel):
    msrp: str = Field(description="MSRP as decimal string", examples=["35000.00"], pattern=MONEY_PATTERN)
    cap_cost: str = Field(
        description="Negotiated capitalized cost as decimal string",
        examples=["33000.00"],
        pattern=MONEY_PATTERN,
    )
    money_factor: str | float | None = Field(
        default=None,
        description=(
            "Raw money factor (e.g. '0.00125') or the APR-style figure "
            "(e.g. '3.0'); values above 1 are divided by 2400"
        ),
        examples=["0.00125"],
    )
    down_payment: str = Field(default="0", pattern=MONEY_PATTERN)
    sales_tax_rate: str = Field(
        default="0",
        description="Flat sales tax in percent",
        examples=["7"],
        pattern=PERCENT_PATTERN,
    )
    trade_in_value: str = Field(default="0", pattern=MONEY_PATTERN)


class LeaseQuoteRequestDTO(LeaseTermsBaseDTO):
    """Request payload for a single-term lease quote."""

    residual_percent: str | None = Field(default=None, examples=["55"], pattern=PERCENT_PATTERN)
    term: int | None = Field(default=None, examples=[36], le=MAX_LEASE_TERM)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "msrp": "35000.00",
                "cap_cost": "33000.00",
                "residual_percent": "55",
                "money_factor": "0.00125",
                "term": 36,
                "down_payment": "2000.00",
                "sales_tax_rate": "7",
            }
        }
    )


class LeaseCompareRequestDTO(LeaseTermsBaseDTO):
    """Request payload for comparing several lease terms."""

    terms: list[Annotated[int, Field(le=MAX_LEASE_TERM)]] = Field(
        default_factory=list, examples=[[24, 36, 48]], max_length=MAX_COMPARE_TERMS
    )
    residual_percents: dict[str, str] = Field(
        default_factory=dict,
        description="Residual percent per term; terms without an entry use 50",
        examples=[{"24": "65", "36": "58"}],
    )
    year: int | None = None
    make: str | None = None
    model: str | None = None


class LeaseQuoteResponseDTO(BaseModel):
    """Lease figures. Payment, residual, interest and depreciation are whole units."""

    term: int
    monthly_payment: str = Field(examples=["416"])
    residual_value: str = Field(examples=["19250"])
    total_interest: str = Field(examples=["2261"])
    depreciation: str = Field(examples=["326"])
    rent_charge: str = Field(examples=["62.81"])
    tax: str = Field(examples=["27.24"])
    net_cap_cost: str = Field(examples=["31000.00"])


class LeaseComparisonResponseDTO(BaseModel):
    vehicle: str = Field(examples=["2024 Honda Accord"])
    options: list[LeaseQuoteResponseDTO]
