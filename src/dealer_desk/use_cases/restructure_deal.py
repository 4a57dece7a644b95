"""Re-pencil an existing deal after its inputs changed."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from dealer_desk.domain.activity import ActivityCategory, ActivityEvent
from dealer_desk.domain.clock import Clock, utcnow
from dealer_desk.domain.deal import Deal, DealInput, build_structure
from dealer_desk.domain.errors import ConflictError
from dealer_desk.ports.activity_publisher import ActivityPublisher
from dealer_desk.ports.deal_repository import DealRepository
from dealer_desk.use_cases.get_deal_by_id import load_deal
from dealer_desk.use_cases.notify import publish_activity

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RestructureDealRequest:
    deal_id: str
    deal_input: DealInput
    user_id: str | None = None


class RestructureDeal:
    """
    Recompute a deal's structure from new inputs.

    The whole structure is rebuilt, never patched, so payment, ACV and
    trade value stay consistent. Closed deals (delivered, cancelled) are
    frozen.
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

    def execute(self, request: RestructureDealRequest) -> Deal:
        """
        Raises:
            NotFoundError: If the deal doesn't exist
            ConflictError: If the deal is delivered or cancelled, or was
                changed by another request after it was loaded
            InvalidInputError: If a pencil input is invalid
        """
        deal = load_deal(self._repository, request.deal_id)

        if deal.lifecycle.is_terminal:
            raise ConflictError(
                f"Deal is {deal.status.value} and can no longer be restructured",
                deal_id=deal.id,
                current_status=deal.status.value,
            )

        previous_payment = deal.structure.monthly_payment
        structure = build_structure(request.deal_input)
        deal = self._repository.save(
            replace(deal, structure=structure, appraisal=request.deal_input.appraisal)
        )

        logger.info(
            "Deal restructured",
            extra={
                "deal_id": deal.id,
                "previous_monthly_payment": str(previous_payment),
                "monthly_payment": str(structure.monthly_payment),
            },
        )

        publish_activity(
            self._publisher,
            ActivityEvent(
                category=ActivityCategory.DEAL,
                type="DEAL_RESTRUCTURED",
                message=(
                    f"Pencil Updated: ${previous_payment}/mo -> "
                    f"${structure.monthly_payment}/mo"
                ),
                occurred_at=self._clock(),
                user_id=request.user_id,
                customer_id=deal.customer_id,
                deal_id=deal.id,
                metadata={
                    "old_payment": str(previous_payment),
                    "new_payment": str(structure.monthly_payment),
                },
            ),
        )

        return deal
