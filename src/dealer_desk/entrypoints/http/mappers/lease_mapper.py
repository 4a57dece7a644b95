from __future__ import annotations

from dealer_desk.domain.lease import LeaseComparison, LeaseQuote, LeaseQuoteInput
from dealer_desk.entrypoints.http.dtos.lease import (
    LeaseCompareRequestDTO,
    LeaseComparisonResponseDTO,
    LeaseQuoteRequestDTO,
    LeaseQuoteResponseDTO,
    LeaseTermsBaseDTO,
)
from dealer_desk.entrypoints.http.mappers.decimal_fields import DecimalFieldParser
from dealer_desk.use_cases.compare_lease_terms import CompareLeaseTermsRequest


class LeaseMapper:
    """Maps between REST DTOs and domain models for lease quotes."""

    @staticmethod
    def _common_fields(dto: LeaseTermsBaseDTO, parser: DecimalFieldParser) -> dict:
        return {
            "msrp": parser.parse("msrp", dto.msrp),
            "cap_cost": parser.parse("cap_cost", dto.cap_cost),
            # Stringified factors are coerced here; the 2400 rule lives in the domain
            "money_factor": parser.parse("money_factor", dto.money_factor),
            "down_payment": parser.parse("down_payment", dto.down_payment),
            "sales_tax_rate": parser.parse("sales_tax_rate", dto.sales_tax_rate),
            "trade_in_value": parser.parse("trade_in_value", dto.trade_in_value),
        }

    @staticmethod
    def to_quote_input(dto: LeaseQuoteRequestDTO) -> LeaseQuoteInput:
        """
        Raises:
            ValidationError: If any decimal string is malformed
        """
        parser = DecimalFieldParser()
        fields = LeaseMapper._common_fields(dto, parser)
        residual_percent = parser.parse("residual_percent", dto.residual_percent)
        parser.raise_if_errors()

        return LeaseQuoteInput(residual_percent=residual_percent, term=dto.term, **fields)

    @staticmethod
    def to_compare_request(dto: LeaseCompareRequestDTO) -> CompareLeaseTermsRequest:
        """
        Raises:
            ValidationError: If a decimal string or a residual_percents key is malformed
        """
        parser = DecimalFieldParser()
        fields = LeaseMapper._common_fields(dto, parser)

        residual_percents = {}
        for key, raw in dto.residual_percents.items():
            field = f"residual_percents.{key}"
            try:
                term = int(key)
            except ValueError:
                parser.errors.append(
                    {"field": field, "message": "Key must be a term in months", "code": "INVALID_TERM"}
                )
                continue
            residual_percents[term] = parser.parse(field, raw)

        parser.raise_if_errors()

        lease = LeaseQuoteInput(
            residual_percents=residual_percents,
            year=dto.year,
            make=dto.make,
            model=dto.model,
            **fields,
        )
        return CompareLeaseTermsRequest(lease=lease, terms=list(dto.terms))

    @staticmethod
    def to_quote_response(quote: LeaseQuote) -> LeaseQuoteResponseDTO:
        return LeaseQuoteResponseDTO(
            term=quote.term,
            monthly_payment=str(quote.monthly_payment),
            residual_value=str(quote.residual_value),
            total_interest=str(quote.total_interest),
            depreciation=str(quote.depreciation),
            rent_charge=str(quote.rent_charge),
            tax=str(quote.tax),
            net_cap_cost=str(quote.net_cap_cost),
        )

    @staticmethod
    def to_comparison_response(comparison: LeaseComparison) -> LeaseComparisonResponseDTO:
        return LeaseComparisonResponseDTO(
            vehicle=comparison.vehicle_label,
            options=[LeaseMapper.to_quote_response(option) for option in comparison.options],
        )
