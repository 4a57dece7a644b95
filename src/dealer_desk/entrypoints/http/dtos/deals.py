from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dealer_desk.domain.lifecycle import DealStatus

MONEY_PATTERN = r"^\d{1,10}(\.\d{1,2})?$"
SIGNED_MONEY_PATTERN = r"^-?\d{1,10}(\.\d{1,2})?$"
RATE_PATTERN = r"^\d{1,3}(\.\d{1,3})?$"
MAX_TERM_MONTHS = 600
MAX_DEDUCTIONS = 50


class DealStructureInputDTO(BaseModel):
    """Pencil inputs. Monetary values are decimal strings."""

    sale_price: str = Field(
        description="Sale price as decimal string",
        examples=["30000.00"],
        pattern=MONEY_PATTERN,
    )
    down_payment: str = Field(
        default="0",
        description="Cash down as decimal string",
        examples=["2000.00"],
        pattern=MONEY_PATTERN,
    )
    trade_in_value: str = Field(
        default="0",
        description="Manual trade figure. Ignored when an appraisal is attached",
        examples=["3000.00"],
        pattern=MONEY_PATTERN,
    )
    term_months: int = Field(
        default=60, description="Loan term in months", examples=[60], ge=1, le=MAX_TERM_MONTHS
    )
    apr: str = Field(
        default="0",
        description="Annual percentage rate, in percent (e.g. '6' = 6%)",
        examples=["6"],
        pattern=RATE_PATTERN,
    )


class DeductionDTO(BaseModel):
    label: str = Field(examples=["Windshield"])
    cost: str = Field(examples=["450.00"], pattern=SIGNED_MONEY_PATTERN)


class AppraisalInputDTO(BaseModel):
    vin: str | None = Field(default=None, max_length=17, examples=["1HGCM82633A004352"])
    base_value: str = Field(examples=["5000.00"], pattern=MONEY_PATTERN)
    deductions: list[DeductionDTO] = Field(default_factory=list, max_length=MAX_DEDUCTIONS)


class StipulationsDTO(BaseModel):
    id_verified: bool = False
    video_sent: bool = False
    insurance_proof: bool = False
    credit_consent: bool = False


class CreateDealRequestDTO(BaseModel):
    """Request payload for penciling a new deal."""

    customer_id: str = Field(min_length=1, examples=["cust-1001"])
    vehicle_id: str = Field(min_length=1, examples=["stock-A113"])
    salesperson_id: str = Field(min_length=1, examples=["user-7"])
    lender_id: str | None = None
    notes: str | None = None
    structure: DealStructureInputDTO
    appraisal: AppraisalInputDTO | None = None
    stipulations: StipulationsDTO | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "customer_id": "cust-1001",
                "vehicle_id": "stock-A113",
                "salesperson_id": "user-7",
                "structure": {
                    "sale_price": "30000.00",
                    "down_payment": "2000.00",
                    "trade_in_value": "3000.00",
                    "term_months": 60,
                    "apr": "6",
                },
            }
        }
    )


class RestructureDealRequestDTO(BaseModel):
    structure: DealStructureInputDTO
    appraisal: AppraisalInputDTO | None = None
    user_id: str | None = None


class ChangeDealStatusRequestDTO(BaseModel):
    status: DealStatus = Field(examples=["pending_manager"])
    user_id: str | None = None


class DealActorDTO(BaseModel):
    user_id: str | None = None


class UpdateStipulationsRequestDTO(BaseModel):
    """Partial checklist update. Omitted items are left as they are."""

    id_verified: bool | None = None
    video_sent: bool | None = None
    insurance_proof: bool | None = None
    credit_consent: bool | None = None
    user_id: str | None = None


class DealStructureDTO(BaseModel):
    sale_price: str
    down_payment: str
    trade_in_value: str
    term_months: int
    apr: str
    principal: str
    monthly_payment: str = Field(examples=["483.32"])
    total_of_payments: str
    finance_charge: str
    has_negative_equity: bool
    is_overpaid: bool


class AppraisalDTO(BaseModel):
    vin: str | None = None
    base_value: str
    deductions: list[DeductionDTO]
    total_deductions: str
    final_acv: str


class StipulationsResponseDTO(StipulationsDTO):
    outstanding: list[str]


class DealResponseDTO(BaseModel):
    """A stored deal with its computed pencil."""

    id: str
    customer_id: str
    vehicle_id: str
    salesperson_id: str
    lender_id: str | None = None
    status: DealStatus
    allowed_transitions: list[DealStatus]
    notes: str | None = None
    structure: DealStructureDTO
    appraisal: AppraisalDTO | None = None
    stipulations: StipulationsResponseDTO
    created_at: str | None = None
    updated_at: str | None = None
    version: int = Field(description="Increments on every stored change", examples=[3])


class DealListResponseDTO(BaseModel):
    deals: list[DealResponseDTO]
    total_count: int
