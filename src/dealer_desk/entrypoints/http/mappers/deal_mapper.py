from __future__ import annotations

from decimal import Decimal

from dealer_desk.domain.appraisal import Appraisal, Deduction
from dealer_desk.domain.deal import Deal, DealInput, Stipulations
from dealer_desk.domain.money import to_cents
from dealer_desk.entrypoints.http.dtos.deals import (
    AppraisalDTO,
    AppraisalInputDTO,
    CreateDealRequestDTO,
    DealResponseDTO,
    DealStructureDTO,
    DealStructureInputDTO,
    DeductionDTO,
    RestructureDealRequestDTO,
    StipulationsDTO,
    StipulationsResponseDTO,
)
from dealer_desk.entrypoints.http.mappers.decimal_fields import DecimalFieldParser
from dealer_desk.use_cases.restructure_deal import RestructureDealRequest
from dealer_desk.use_cases.structure_deal import StructureDealRequest


class DealMapper:
    """Maps between REST DTOs and domain models for deals."""

    @staticmethod
    def to_deal_input(
        structure: DealStructureInputDTO,
        appraisal: AppraisalInputDTO | None,
    ) -> DealInput:
        """
        Converts pencil DTOs to a domain DealInput (str → Decimal).

        Raises:
            ValidationError: If any monetary string is not a valid decimal
        """
        parser = DecimalFieldParser()

        sale_price = parser.parse("structure.sale_price", structure.sale_price)
        down_payment = parser.parse("structure.down_payment", structure.down_payment)
        trade_in_value = parser.parse("structure.trade_in_value", structure.trade_in_value)
        apr = parser.parse("structure.apr", structure.apr)

        domain_appraisal = None
        if appraisal is not None:
            base_value = parser.parse("appraisal.base_value", appraisal.base_value)
            deductions = tuple(
                Deduction(
                    label=deduction.label,
                    cost=parser.parse(f"appraisal.deductions.{index}.cost", deduction.cost),
                )
                for index, deduction in enumerate(appraisal.deductions)
            )
            domain_appraisal = Appraisal(
                base_value=base_value,
                deductions=deductions,
                vin=appraisal.vin,
            )

        parser.raise_if_errors()

        return DealInput(
            sale_price=sale_price,
            down_payment=down_payment,
            trade_in_value=trade_in_value,
            term_months=structure.term_months,
            apr=apr,
            appraisal=domain_appraisal,
        )

    @staticmethod
    def to_structure_request(dto: CreateDealRequestDTO) -> StructureDealRequest:
        stipulations = dto.stipulations or StipulationsDTO()
        return StructureDealRequest(
            customer_id=dto.customer_id,
            vehicle_id=dto.vehicle_id,
            salesperson_id=dto.salesperson_id,
            lender_id=dto.lender_id,
            notes=dto.notes,
            deal_input=DealMapper.to_deal_input(dto.structure, dto.appraisal),
            stipulations=Stipulations(**stipulations.model_dump()),
        )

    @staticmethod
    def to_restructure_request(deal_id: str, dto: RestructureDealRequestDTO) -> RestructureDealRequest:
        return RestructureDealRequest(
            deal_id=deal_id,
            deal_input=DealMapper.to_deal_input(dto.structure, dto.appraisal),
            user_id=dto.user_id,
        )

    @staticmethod
    def to_response(deal: Deal) -> DealResponseDTO:
        """
        Converts a Deal to its response DTO (Decimal → str).

        principal and final ACV are kept at full precision in the domain and
        rounded to cents here, at the point of exposure.
        """
        structure = deal.structure

        appraisal = None
        if deal.appraisal is not None:
            final_acv = structure.final_acv
            if final_acv is None:
                final_acv = deal.appraisal.final_acv
            appraisal = AppraisalDTO(
                vin=deal.appraisal.vin,
                base_value=_money(deal.appraisal.base_value),
                deductions=[
                    DeductionDTO(label=d.label, cost=_money(d.cost))
                    for d in deal.appraisal.deductions
                ],
                total_deductions=_money(deal.appraisal.total_deductions),
                final_acv=_money(final_acv),
            )

        stipulations = deal.stipulations
        return DealResponseDTO(
            id=deal.id,
            customer_id=deal.customer_id,
            vehicle_id=deal.vehicle_id,
            salesperson_id=deal.salesperson_id,
            lender_id=deal.lender_id,
            status=deal.status,
            allowed_transitions=sorted(deal.lifecycle.allowed_transitions(), key=lambda s: s.value),
            notes=deal.notes,
            structure=DealStructureDTO(
                sale_price=_money(structure.sale_price),
                down_payment=_money(structure.down_payment),
                trade_in_value=_money(structure.trade_in_value),
                term_months=structure.term_months,
                apr=str(structure.apr),
                principal=_money(structure.principal),
                monthly_payment=_money(structure.monthly_payment),
                total_of_payments=_money(structure.total_of_payments),
                finance_charge=_money(structure.finance_charge),
                has_negative_equity=structure.has_negative_equity,
                is_overpaid=structure.is_overpaid,
            ),
            appraisal=appraisal,
            stipulations=StipulationsResponseDTO(
                id_verified=stipulations.id_verified,
                video_sent=stipulations.video_sent,
                insurance_proof=stipulations.insurance_proof,
                credit_consent=stipulations.credit_consent,
                outstanding=stipulations.outstanding(),
            ),
            created_at=deal.created_at.isoformat() if deal.created_at else None,
            updated_at=deal.updated_at.isoformat() if deal.updated_at else None,
            version=deal.version,
        )


def _money(amount: Decimal) -> str:
    return str(to_cents(amount))
