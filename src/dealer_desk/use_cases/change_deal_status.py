"""Move a deal through its status lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from dealer_desk.domain.activity import status_change_activity
from dealer_desk.domain.clock import Clock, utcnow
from dealer_desk.domain.deal import Deal
from dealer_desk.domain.lifecycle import DealStatus
from dealer_desk.ports.activity_publisher import ActivityPublisher
from dealer_desk.ports.deal_repository import DealRepository
from dealer_desk.use_cases.get_deal_by_id import load_deal
from dealer_desk.use_cases.notify import publish_activity

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChangeDealStatusRequest:
    deal_id: str
    status: DealStatus
    user_id: str | None = None


class ChangeDealStatus:
    """
    Apply a lifecycle transition and record it.

    Responsibilities:
    - Load the deal (NotFoundError if missing)
    - Validate the move against the transition table
    - Persist the new status
    - Relay the status change to the activity feed (best-effort)

    Requesting the current status persists and publishes nothing.
    """

    def __init__(
        self,
        deal_repository: DealRepository,
        activity_publisher: ActivityPublisher | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._repository = deal_repository
        self._publisher = activity_publisher
        self._clock = clock

    def execute(self, request: ChangeDealStatusRequest) -> Deal:
        """
        Raises:
            NotFoundError: If the deal doesn't exist
            InvalidTransitionError: If the transition is not allowed
            StaleDealError: If another request changed the deal after it was
                loaded here; nothing is saved or published
        """
        deal = load_deal(self._repository, request.deal_id)

        result = deal.lifecycle.transition_to(request.status, at=self._clock())
        if result.event is None:
            logger.debug(
                "Deal status unchanged",
                extra={"deal_id": deal.id, "status": deal.status.value},
            )
            return deal

        deal = self._repository.save(replace(deal, status=result.lifecycle.status))

        logger.info(
            "Deal status changed",
            extra={
                "deal_id": deal.id,
                "from_status": result.event.from_status.value,
                "to_status": result.event.to_status.value,
            },
        )

        publish_activity(
            self._publisher,
            status_change_activity(
                result.event,
                user_id=request.user_id,
                customer_id=deal.customer_id,
            ),
        )

        return deal
