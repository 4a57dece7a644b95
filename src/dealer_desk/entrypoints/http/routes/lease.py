from fastapi import APIRouter, Depends

from dealer_desk.entrypoints.http.dependencies import (
    get_compare_lease_terms_use_case,
    get_quote_lease_use_case,
)
from dealer_desk.entrypoints.http.dtos.lease import (
    LeaseCompareRequestDTO,
    LeaseComparisonResponseDTO,
    LeaseQuoteRequestDTO,
    LeaseQuoteResponseDTO,
)
from dealer_desk.entrypoints.http.error_responses import ErrorResponse
from dealer_desk.entrypoints.http.mappers.lease_mapper import LeaseMapper
from dealer_desk.use_cases.compare_lease_terms import CompareLeaseTerms
from dealer_desk.use_cases.quote_lease import QuoteLease


router = APIRouter(tags=["Lease"])


@router.post(
    "/lease/calculate",
    response_model=LeaseQuoteResponseDTO,
    summary="Quote a lease",
    description="""
    Single-term lease quote.

    ## Money Factor
    - Raw factor (e.g. "0.00125") is used as-is
    - Values above 1 are read as the APR-style figure and divided by 2400

    ## Calculation
    - Residual = MSRP × residual_percent / 100
    - Net cap cost = cap_cost - down_payment - trade_in_value
    - Depreciation = max(0, (net cap cost - residual) / term)
    - Rent charge = (net cap cost + residual) × money factor
    - Tax = (depreciation + rent charge) × sales_tax_rate / 100
    - Monthly payment, residual, total interest and depreciation are whole units
    """,
    responses={422: {"model": ErrorResponse, "description": "Missing or invalid field"}},
)
def calculate_lease(
    payload: LeaseQuoteRequestDTO,
    use_case: QuoteLease = Depends(get_quote_lease_use_case),
) -> LeaseQuoteResponseDTO:
    lease = LeaseMapper.to_quote_input(payload)
    quote = use_case.execute(lease)
    return LeaseMapper.to_quote_response(quote)


@router.post(
    "/lease/compare",
    response_model=LeaseComparisonResponseDTO,
    summary="Compare lease terms",
    description="One option per requested term, in request order. Terms without a residual entry use 50%.",
    responses={422: {"model": ErrorResponse, "description": "Missing or invalid field"}},
)
def compare_lease_terms(
    payload: LeaseCompareRequestDTO,
    use_case: CompareLeaseTerms = Depends(get_compare_lease_terms_use_case),
) -> LeaseComparisonResponseDTO:
    request = LeaseMapper.to_compare_request(payload)
    comparison = use_case.execute(request)
    return LeaseMapper.to_comparison_response(comparison)
