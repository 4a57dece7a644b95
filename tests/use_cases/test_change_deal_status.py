from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from decimal import Decimal
from threading import Barrier

import pytest

from dealer_desk.adapters.in_memory_activity_publisher import InMemoryActivityPublisher
from dealer_desk.adapters.in_memory_deal_repository import InMemoryDealRepository
from dealer_desk.domain.activity import ActivityLevel
from dealer_desk.domain.deal import Deal, DealInput, build_structure
from dealer_desk.domain.errors import InvalidTransitionError, NotFoundError, StaleDealError
from dealer_desk.domain.lifecycle import DealStatus
from dealer_desk.use_cases.change_deal_status import ChangeDealStatus, ChangeDealStatusRequest

NOW = datetime(2026, 5, 2, 9, 30, tzinfo=timezone.utc)


def make_deal(status: DealStatus = DealStatus.PENDING) -> Deal:
    return Deal(
        id="deal-1",
        customer_id="cust-1",
        vehicle_id="stock-9",
        salesperson_id="user-7",
        structure=build_structure(DealInput(sale_price=Decimal("20000"))),
        status=status,
    )


@pytest.fixture
def publisher() -> InMemoryActivityPublisher:
    return InMemoryActivityPublisher()


def build_use_case(
    deal: Deal, publisher: InMemoryActivityPublisher
) -> tuple[ChangeDealStatus, InMemoryDealRepository]:
    repository = InMemoryDealRepository(deals=[deal], clock=lambda: NOW)
    use_case = ChangeDealStatus(
        deal_repository=repository, activity_publisher=publisher, clock=lambda: NOW
    )
    return use_case, repository


def test_commit_to_manager(publisher: InMemoryActivityPublisher) -> None:
    use_case, repository = build_use_case(make_deal(), publisher)

    deal = use_case.execute(
        ChangeDealStatusRequest(deal_id="deal-1", status=DealStatus.PENDING_MANAGER, user_id="user-7")
    )

    assert deal.status == DealStatus.PENDING_MANAGER
    assert repository.get_by_id("deal-1").status == DealStatus.PENDING_MANAGER

    [event] = publisher.events
    assert event.type == "COMMIT_TO_MANAGER"
    assert event.message == "Deal submitted to Tower for final approval."
    assert event.user_id == "user-7"
    assert event.customer_id == "cust-1"
    assert event.metadata == {"from_status": "pending", "to_status": "pending_manager"}
    assert event.occurred_at == NOW


def test_approval_publishes_status_update(publisher: InMemoryActivityPublisher) -> None:
    use_case, _ = build_use_case(make_deal(DealStatus.PENDING_MANAGER), publisher)

    use_case.execute(ChangeDealStatusRequest(deal_id="deal-1", status=DealStatus.APPROVED))

    [event] = publisher.events
    assert event.type == "STATUS_UPDATED"
    assert event.message == "Deal status updated to APPROVED"
    assert event.level == ActivityLevel.SUCCESS


@pytest.mark.parametrize(
    "status", [DealStatus.PENDING, DealStatus.PENDING_MANAGER, DealStatus.APPROVED]
)
def test_open_deals_can_be_cancelled(
    publisher: InMemoryActivityPublisher, status: DealStatus
) -> None:
    use_case, _ = build_use_case(make_deal(status), publisher)

    deal = use_case.execute(ChangeDealStatusRequest(deal_id="deal-1", status=DealStatus.CANCELLED))

    assert deal.status == DealStatus.CANCELLED
    assert publisher.events[0].level == ActivityLevel.WARNING


def test_delivered_deal_rejects_recommit(publisher: InMemoryActivityPublisher) -> None:
    use_case, repository = build_use_case(make_deal(DealStatus.DELIVERED), publisher)

    with pytest.raises(InvalidTransitionError):
        use_case.execute(
            ChangeDealStatusRequest(deal_id="deal-1", status=DealStatus.PENDING_MANAGER)
        )

    assert repository.get_by_id("deal-1").status == DealStatus.DELIVERED
    assert publisher.events == []


def test_same_status_is_a_noop(publisher: InMemoryActivityPublisher) -> None:
    original = make_deal(DealStatus.APPROVED)
    use_case, repository = build_use_case(original, publisher)

    deal = use_case.execute(ChangeDealStatusRequest(deal_id="deal-1", status=DealStatus.APPROVED))

    assert deal == original
    assert repository.get_by_id("deal-1").updated_at is None
    assert publisher.events == []


def test_unknown_deal(publisher: InMemoryActivityPublisher) -> None:
    use_case, _ = build_use_case(make_deal(), publisher)

    with pytest.raises(NotFoundError, match="Deal with identifier 'nope' not found"):
        use_case.execute(ChangeDealStatusRequest(deal_id="nope", status=DealStatus.CANCELLED))


class BarrierDealRepository(InMemoryDealRepository):
    """Holds every reader until both have loaded the same copy of the deal."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.barrier = Barrier(2, timeout=5)

    def get_by_id(self, deal_id: str) -> Deal | None:
        deal = super().get_by_id(deal_id)
        self.barrier.wait()
        return deal


def test_concurrent_terminal_changes_only_one_wins(publisher: InMemoryActivityPublisher) -> None:
    repository = BarrierDealRepository(deals=[make_deal(DealStatus.APPROVED)], clock=lambda: NOW)
    use_case = ChangeDealStatus(
        deal_repository=repository, activity_publisher=publisher, clock=lambda: NOW
    )

    def change(status: DealStatus) -> str:
        """Returns 'changed' or 'stale'. Only StaleDealError is expected."""
        try:
            use_case.execute(ChangeDealStatusRequest(deal_id="deal-1", status=status))
            return "changed"
        except StaleDealError:
            return "stale"

    statuses = [DealStatus.DELIVERED, DealStatus.CANCELLED]
    with ThreadPoolExecutor(max_workers=2) as executor:
        futures = [executor.submit(change, status) for status in statuses]
        outcomes = [future.result() for future in futures]

    assert sorted(outcomes) == ["changed", "stale"]
    winner = statuses[outcomes.index("changed")]
    stored = InMemoryDealRepository.get_by_id(repository, "deal-1")
    assert stored.status == winner
    assert stored.version == 1
    [event] = publisher.events
    assert event.metadata == {"from_status": "approved", "to_status": winner.value}


def test_stale_copy_is_not_saved(publisher: InMemoryActivityPublisher) -> None:
    use_case, repository = build_use_case(make_deal(DealStatus.PENDING_MANAGER), publisher)
    stale = repository.get_by_id("deal-1")
    use_case.execute(ChangeDealStatusRequest(deal_id="deal-1", status=DealStatus.APPROVED))

    with pytest.raises(StaleDealError) as exc_info:
        repository.save(stale)

    assert exc_info.value.context["expected_version"] == 0
    assert exc_info.value.context["current_version"] == 1
    assert repository.get_by_id("deal-1").status == DealStatus.APPROVED
