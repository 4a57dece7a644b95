from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from dealer_desk.domain.activity import ActivityCategory, ActivityEvent
from dealer_desk.domain.clock import Clock, utcnow
from dealer_desk.domain.deal import Deal
from dealer_desk.ports.activity_publisher import ActivityPublisher
from dealer_desk.ports.deal_repository import DealRepository
from dealer_desk.use_cases.get_deal_by_id import load_deal
from dealer_desk.use_cases.notify import publish_activity

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UpdateStipulationsRequest:
    """Partial update: None leaves a checklist item untouched."""

    deal_id: str
    id_verified: bool | None = None
    video_sent: bool | None = None
    insurance_proof: bool | None = None
    credit_consent: bool | None = None
    user_id: str | None = None

    def changes(self) -> dict[str, bool]:
        return {
            name: value
            for name in ("id_verified", "video_sent", "insurance_proof", "credit_consent")
            if (value := getattr(self, name)) is not None
        }


class UpdateStipulations:
    """Tick or untick checklist items. Allowed in every status."""

    def __init__(
        self,
        deal_repository: DealRepository,
        activity_publisher: ActivityPublisher | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._repository = deal_repository
        self._publisher = activity_publisher
        self._clock = clock

    def execute(self, request: UpdateStipulationsRequest) -> Deal:
        deal = load_deal(self._repository, request.deal_id)

        changes = request.changes()
        stipulations = replace(deal.stipulations, **changes)
        if stipulations == deal.stipulations:
            return deal

        deal = self._repository.save(replace(deal, stipulations=stipulations))
        outstanding = stipulations.outstanding()

        logger.info(
            "Stipulations updated",
            extra={"deal_id": deal.id, "outstanding": outstanding},
        )

        if outstanding:
            message = f"Stipulations updated: {len(outstanding)} outstanding"
        else:
            message = "All stipulations cleared"

        publish_activity(
            self._publisher,
            ActivityEvent(
                category=ActivityCategory.DEAL,
                type="STIPULATIONS_UPDATED",
                message=message,
                occurred_at=self._clock(),
                user_id=request.user_id,
                customer_id=deal.customer_id,
                deal_id=deal.id,
                metadata={"changes": changes, "outstanding": outstanding},
            ),
        )

        return deal
