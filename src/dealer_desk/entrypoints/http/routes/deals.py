from fastapi import APIRouter, Depends, Query, status

from dealer_desk.domain.lifecycle import DealStatus
from dealer_desk.entrypoints.http.dependencies import (
    get_change_deal_status_use_case,
    get_deal_by_id_use_case,
    get_list_deals_use_case,
    get_restructure_deal_use_case,
    get_structure_deal_use_case,
    get_update_stipulations_use_case,
)
from dealer_desk.entrypoints.http.dtos.deals import (
    ChangeDealStatusRequestDTO,
    CreateDealRequestDTO,
    DealActorDTO,
    DealListResponseDTO,
    DealResponseDTO,
    RestructureDealRequestDTO,
    UpdateStipulationsRequestDTO,
)
from dealer_desk.entrypoints.http.error_responses import ErrorResponse
from dealer_desk.entrypoints.http.mappers.deal_mapper import DealMapper
from dealer_desk.use_cases.change_deal_status import ChangeDealStatus, ChangeDealStatusRequest
from dealer_desk.use_cases.get_deal_by_id import GetDealById, GetDealByIdRequest
from dealer_desk.use_cases.list_deals import ListDeals, ListDealsRequest
from dealer_desk.use_cases.restructure_deal import RestructureDeal
from dealer_desk.use_cases.structure_deal import StructureDeal
from dealer_desk.use_cases.update_stipulations import (
    UpdateStipulations,
    UpdateStipulationsRequest,
)


router = APIRouter(tags=["Deals"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Deal not found"}}
_VALIDATION = {422: {"model": ErrorResponse, "description": "Validation error"}}
_CONFLICT = {409: {"model": ErrorResponse, "description": "Not allowed in the deal's current status"}}


@router.post(
    "/deals",
    response_model=DealResponseDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Pencil a new deal",
    description="""
    Create a deal from a pencil (sale price, down payment, trade, term, APR).

    ## Monetary Values
    - Decimal strings with up to 2 decimal places (APR up to 3)
    - Responses round money to cents

    ## Calculation
    - An attached appraisal's ACV replaces the manual trade_in_value
    - Principal = sale_price - down_payment - trade value (may be negative)
    - Monthly payment uses the standard amortization formula; 0% APR divides evenly
    """,
    responses={**_VALIDATION},
)
def create_deal(
    payload: CreateDealRequestDTO,
    use_case: StructureDeal = Depends(get_structure_deal_use_case),
) -> DealResponseDTO:
    request = DealMapper.to_structure_request(payload)
    deal = use_case.execute(request)
    return DealMapper.to_response(deal)


@router.get(
    "/deals",
    response_model=DealListResponseDTO,
    summary="List deals, newest first",
)
def list_deals(
    salesperson_id: str | None = Query(
        default=None,
        description="Only deals owned by this salesperson (omit for the whole tower)",
    ),
    use_case: ListDeals = Depends(get_list_deals_use_case),
) -> DealListResponseDTO:
    deals = use_case.execute(ListDealsRequest(salesperson_id=salesperson_id))
    return DealListResponseDTO(
        deals=[DealMapper.to_response(deal) for deal in deals],
        total_count=len(deals),
    )


@router.get(
    "/deals/{deal_id}",
    response_model=DealResponseDTO,
    summary="Get a deal",
    responses={**_NOT_FOUND},
)
def get_deal(
    deal_id: str,
    use_case: GetDealById = Depends(get_deal_by_id_use_case),
) -> DealResponseDTO:
    deal = use_case.execute(GetDealByIdRequest(deal_id=deal_id))
    return DealMapper.to_response(deal)


@router.put(
    "/deals/{deal_id}/structure",
    response_model=DealResponseDTO,
    summary="Re-pencil a deal",
    description="Recompute the whole structure from new inputs. Delivered and cancelled deals are frozen.",
    responses={**_NOT_FOUND, **_CONFLICT, **_VALIDATION},
)
def restructure_deal(
    deal_id: str,
    payload: RestructureDealRequestDTO,
    use_case: RestructureDeal = Depends(get_restructure_deal_use_case),
) -> DealResponseDTO:
    request = DealMapper.to_restructure_request(deal_id, payload)
    deal = use_case.execute(request)
    return DealMapper.to_response(deal)


@router.patch(
    "/deals/{deal_id}/status",
    response_model=DealResponseDTO,
    summary="Change deal status",
    description="""
    Allowed moves: pending → pending_manager → approved → delivered, and
    cancelled from any non-terminal status. Requesting the current status is a no-op.
    A forbidden move returns 409 with code INVALID_TRANSITION.
    """,
    responses={**_NOT_FOUND, **_CONFLICT},
)
def change_deal_status(
    deal_id: str,
    payload: ChangeDealStatusRequestDTO,
    use_case: ChangeDealStatus = Depends(get_change_deal_status_use_case),
) -> DealResponseDTO:
    deal = use_case.execute(
        ChangeDealStatusRequest(deal_id=deal_id, status=payload.status, user_id=payload.user_id)
    )
    return DealMapper.to_response(deal)


@router.patch(
    "/deals/{deal_id}/commit",
    response_model=DealResponseDTO,
    summary="Send a deal to the manager",
    responses={**_NOT_FOUND, **_CONFLICT},
)
def commit_to_manager(
    deal_id: str,
    payload: DealActorDTO | None = None,
    use_case: ChangeDealStatus = Depends(get_change_deal_status_use_case),
) -> DealResponseDTO:
    deal = use_case.execute(
        ChangeDealStatusRequest(
            deal_id=deal_id,
            status=DealStatus.PENDING_MANAGER,
            user_id=payload.user_id if payload else None,
        )
    )
    return DealMapper.to_response(deal)


@router.patch(
    "/deals/{deal_id}/stipulations",
    response_model=DealResponseDTO,
    summary="Update the stipulation checklist",
    responses={**_NOT_FOUND},
)
def update_stipulations(
    deal_id: str,
    payload: UpdateStipulationsRequestDTO,
    use_case: UpdateStipulations = Depends(get_update_stipulations_use_case),
) -> DealResponseDTO:
    deal = use_case.execute(UpdateStipulationsRequest(deal_id=deal_id, **payload.model_dump()))
    return DealMapper.to_response(deal)
