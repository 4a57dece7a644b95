"""Create a deal from a fresh pencil."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable

from dealer_desk.domain.activity import ActivityCategory, ActivityEvent, ActivityLevel
from dealer_desk.domain.clock import Clock, utcnow
from dealer_desk.domain.deal import Deal, DealInput, Stipulations, build_structure
from dealer_desk.domain.errors import InvalidInputError
from dealer_desk.domain.money import to_whole
from dealer_desk.ports.activity_publisher import ActivityPublisher
from dealer_desk.ports.deal_repository import DealRepository
from dealer_desk.use_cases.notify import publish_activity

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StructureDealRequest:
    customer_id: str
    vehicle_id: str
    salesperson_id: str
    deal_input: DealInput
    stipulations: Stipulations = field(default_factory=Stipulations)
    lender_id: str | None = None
    notes: str | None = None


class StructureDeal:
    """
    Pencil a new deal.

    Responsibilities:
    - Validate party references
    - Compute the structure (ACV reconciliation, payment math)
    - Persist the deal in 'pending'
    - Publish DEAL_CREATED to the activity feed (best-effort)
    """

    def __init__(
        self,
        deal_repository: DealRepository,
        activity_publisher: ActivityPublisher | None = None,
        clock: Clock = utcnow,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._repository = deal_repository
        self._publisher = activity_publisher
        self._clock = clock
        self._id_factory = id_factory

    def execute(self, request: StructureDealRequest) -> Deal:
        """
        Raises:
            InvalidInputError: If a party id is blank or a pencil input is invalid
        """
        for name in ("customer_id", "vehicle_id", "salesperson_id"):
            if not getattr(request, name, "").strip():
                raise InvalidInputError(name, "is required", code="MISSING_FIELD")

        structure = build_structure(request.deal_input)

        deal = self._repository.add(
            Deal(
                id=self._id_factory(),
                customer_id=request.customer_id,
                vehicle_id=request.vehicle_id,
                salesperson_id=request.salesperson_id,
                lender_id=request.lender_id,
                structure=structure,
                appraisal=request.deal_input.appraisal,
                stipulations=request.stipulations,
                notes=request.notes,
            )
        )

        logger.info(
            "Deal penciled",
            extra={
                "deal_id": deal.id,
                "monthly_payment": str(structure.monthly_payment),
                "principal": str(structure.principal),
                "negative_equity": structure.has_negative_equity,
            },
        )

        publish_activity(
            self._publisher,
            ActivityEvent(
                category=ActivityCategory.DEAL,
                type="DEAL_CREATED",
                message=(
                    f"Pencil Created: ${to_whole(structure.monthly_payment)}/mo "
                    f"for {deal.vehicle_id}"
                ),
                occurred_at=self._clock(),
                user_id=deal.salesperson_id,
                customer_id=deal.customer_id,
                deal_id=deal.id,
                level=ActivityLevel.WARNING if structure.has_negative_equity else ActivityLevel.INFO,
                metadata={"monthly_payment": str(structure.monthly_payment)},
            ),
        )

        return deal
