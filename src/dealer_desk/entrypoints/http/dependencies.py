"""
Dependency injection for FastAPI routes.

Database sessions are per-request, never cached. Only stateless (or
process-wide by design) singletons use lru_cache.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Generator

from fastapi import Depends

from dealer_desk.adapters.in_memory_deal_repository import InMemoryDealRepository
from dealer_desk.adapters.logging_activity_publisher import LoggingActivityPublisher
from dealer_desk.adapters.postgres_deal_repository import PostgresDealRepository
from dealer_desk.infra.db.config import repository_backend
from dealer_desk.infra.db.session import get_session
from dealer_desk.ports.activity_publisher import ActivityPublisher
from dealer_desk.ports.deal_repository import DealRepository
from dealer_desk.use_cases.change_deal_status import ChangeDealStatus
from dealer_desk.use_cases.compare_lease_terms import CompareLeaseTerms
from dealer_desk.use_cases.get_deal_by_id import GetDealById
from dealer_desk.use_cases.list_deals import ListDeals
from dealer_desk.use_cases.quote_lease import QuoteLease
from dealer_desk.use_cases.restructure_deal import RestructureDeal
from dealer_desk.use_cases.structure_deal import StructureDeal
from dealer_desk.use_cases.update_stipulations import UpdateStipulations


@lru_cache
def get_in_memory_deal_repository() -> InMemoryDealRepository:
    """Process-wide store used when DEALER_DESK_REPOSITORY=memory."""
    return InMemoryDealRepository()


def get_deal_repository() -> Generator[DealRepository, None, None]:
    """
    Provides a deal repository for a single request.

    For PostgreSQL the repository wraps a per-request session from
    get_session(), which commits when the request succeeds and rolls back
    when it raises.
    """
    if repository_backend() == "memory":
        yield get_in_memory_deal_repository()
        return

    with get_session() as session:
        yield PostgresDealRepository(session=session)


@lru_cache
def get_activity_publisher() -> ActivityPublisher:
    return LoggingActivityPublisher()


def get_structure_deal_use_case(
    repository: DealRepository = Depends(get_deal_repository),
    publisher: ActivityPublisher = Depends(get_activity_publisher),
) -> StructureDeal:
    return StructureDeal(deal_repository=repository, activity_publisher=publisher)


def get_restructure_deal_use_case(
    repository: DealRepository = Depends(get_deal_repository),
    publisher: ActivityPublisher = Depends(get_activity_publisher),
) -> RestructureDeal:
    return RestructureDeal(deal_repository=repository, activity_publisher=publisher)


def get_change_deal_status_use_case(
    repository: DealRepository = Depends(get_deal_repository),
    publisher: ActivityPublisher = Depends(get_activity_publisher),
) -> ChangeDealStatus:
    return ChangeDealStatus(deal_repository=repository, activity_publisher=publisher)


def get_update_stipulations_use_case(
    repository: DealRepository = Depends(get_deal_repository),
    publisher: ActivityPublisher = Depends(get_activity_publisher),
) -> UpdateStipulations:
    return UpdateStipulations(deal_repository=repository, activity_publisher=publisher)


def get_deal_by_id_use_case(
    repository: DealRepository = Depends(get_deal_repository),
) -> GetDealById:
    return GetDealById(deal_repository=repository)


def get_list_deals_use_case(
    repository: DealRepository = Depends(get_deal_repository),
) -> ListDeals:
    return ListDeals(deal_repository=repository)


def get_quote_lease_use_case() -> QuoteLease:
    return QuoteLease()


def get_compare_lease_terms_use_case() -> CompareLeaseTerms:
    return CompareLeaseTerms()
