"""Get deal by ID use case."""

from __future__ import annotations

from dataclasses import dataclass

from dealer_desk.domain.deal import Deal
from dealer_desk.domain.errors import NotFoundError
from dealer_desk.ports.deal_repository import DealRepository


@dataclass(frozen=True, slots=True)
class GetDealByIdRequest:
    deal_id: str


def load_deal(repository: DealRepository, deal_id: str) -> Deal:
    """
    Raises:
        NotFoundError: If no deal with deal_id exists
    """
    deal = repository.get_by_id(deal_id)
    if deal is None:
        raise NotFoundError(resource="Deal", identifier=deal_id)
    return deal


class GetDealById:
    """Fetch one deal, including its stored structure and stipulations."""

    def __init__(self, deal_repository: DealRepository) -> None:
        self._repository = deal_repository

    def execute(self, request: GetDealByIdRequest) -> Deal:
        return load_deal(self._repository, request.deal_id)
