from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from dealer_desk.domain.lifecycle import DealStatus, DealStatusChanged


class ActivityCategory(str, Enum):
    DEAL = "DEAL"
    CUSTOMER = "CUSTOMER"
    INVENTORY = "INVENTORY"
    SYSTEM = "SYSTEM"
    FINANCE = "FINANCE"
    TASK = "TASK"


class ActivityLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"
    SUCCESS = "success"
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True, slots=True)
class ActivityEvent:
    """An entry for the live activity feed ("the pulse")."""

    category: ActivityCategory
    type: str
    message: str
    occurred_at: datetime
    user_id: str | None = None
    customer_id: str | None = None
    deal_id: str | None = None
    level: ActivityLevel = ActivityLevel.INFO
    metadata: dict[str, Any] = field(default_factory=dict)


_STATUS_LEVELS = {
    DealStatus.APPROVED: ActivityLevel.SUCCESS,
    DealStatus.DELIVERED: ActivityLevel.SUCCESS,
    DealStatus.CANCELLED: ActivityLevel.WARNING,
}


def status_change_activity(
    change: DealStatusChanged,
    *,
    user_id: str | None,
    customer_id: str | None,
) -> ActivityEvent:
    if change.to_status == DealStatus.PENDING_MANAGER:
        event_type = "COMMIT_TO_MANAGER"
        message = "Deal submitted to Tower for final approval."
    else:
        event_type = "STATUS_UPDATED"
        message = f"Deal status updated to {change.to_status.value.upper()}"

    return ActivityEvent(
        category=ActivityCategory.DEAL,
        type=event_type,
        message=message,
        occurred_at=change.occurred_at,
        user_id=user_id,
        customer_id=customer_id,
        deal_id=change.deal_id,
        level=_STATUS_LEVELS.get(change.to_status, ActivityLevel.INFO),
        metadata={
            "from_status": change.from_status.value,
            "to_status": change.to_status.value,
        },
    )
