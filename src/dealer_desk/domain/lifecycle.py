"""Deal status lifecycle.

pending -> pending_manager -> approved -> delivered, with cancelled reachable
from every non-terminal status. delivered and cancelled are terminal.

The lifecycle never performs I/O. Every real transition returns a
DealStatusChanged event; persisting the deal and relaying the event to the
activity feed is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from dealer_desk.domain.errors import InvalidTransitionError


class DealStatus(str, Enum):
    PENDING = "pending"
    PENDING_MANAGER = "pending_manager"
    APPROVED = "approved"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


TRANSITIONS: dict[DealStatus, frozenset[DealStatus]] = {
    DealStatus.PENDING: frozenset({DealStatus.PENDING_MANAGER, DealStatus.CANCELLED}),
    DealStatus.PENDING_MANAGER: frozenset({DealStatus.APPROVED, DealStatus.CANCELLED}),
    DealStatus.APPROVED: frozenset({DealStatus.DELIVERED, DealStatus.CANCELLED}),
    DealStatus.DELIVERED: frozenset(),
    DealStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset(status for status, targets in TRANSITIONS.items() if not targets)


@dataclass(frozen=True, slots=True)
class DealStatusChanged:
    deal_id: str
    from_status: DealStatus
    to_status: DealStatus
    occurred_at: datetime


@dataclass(frozen=True, slots=True)
class TransitionResult:
    lifecycle: DealLifecycle
    event: DealStatusChanged | None = None

    @property
    def changed(self) -> bool:
        return self.event is not None


@dataclass(frozen=True, slots=True)
class DealLifecycle:
    deal_id: str
    status: DealStatus = DealStatus.PENDING

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def allowed_transitions(self) -> frozenset[DealStatus]:
        return TRANSITIONS[self.status]

    def can_transition_to(self, requested: DealStatus) -> bool:
        return requested == self.status or requested in TRANSITIONS[self.status]

    def transition_to(self, requested: DealStatus, *, at: datetime) -> TransitionResult:
        """
        Move to the requested status.

        Requesting the current status is a no-op (no event). Terminal
        statuses therefore accept themselves but nothing else.

        Raises:
            InvalidTransitionError: If the transition table forbids the move
        """
        requested = DealStatus(requested)

        if requested == self.status:
            return TransitionResult(lifecycle=self)

        if requested not in TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                current=self.status.value,
                requested=requested.value,
                allowed=[s.value for s in TRANSITIONS[self.status]],
            )

        event = DealStatusChanged(
            deal_id=self.deal_id,
            from_status=self.status,
            to_status=requested,
            occurred_at=at,
        )
        return TransitionResult(
            lifecycle=DealLifecycle(deal_id=self.deal_id, status=requested),
            event=event,
        )
