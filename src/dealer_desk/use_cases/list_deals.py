from __future__ import annotations

from dataclasses import dataclass

from dealer_desk.domain.deal import Deal
from dealer_desk.ports.deal_repository import DealRepository


@dataclass(frozen=True, slots=True)
class ListDealsRequest:
    # Sales staff see their own pipeline; managers pass None to see every deal
    salesperson_id: str | None = None


class ListDeals:
    def __init__(self, deal_repository: DealRepository) -> None:
        self._repository = deal_repository

    def execute(self, request: ListDealsRequest) -> list[Deal]:
        return self._repository.search(salesperson_id=request.salesperson_id)
