from __future__ import annotations

import logging

from dealer_desk.domain.activity import ActivityEvent
from dealer_desk.ports.activity_publisher import ActivityPublisher

logger = logging.getLogger(__name__)


class LoggingActivityPublisher(ActivityPublisher):
    """
    Writes each activity event as a structured log record.

    Default publisher for the HTTP app until a feed transport
    (socket broadcast, audit table) is wired in.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    def publish(self, event: ActivityEvent) -> None:
        self._logger.info(
            event.message,
            extra={
                "activity_category": event.category.value,
                "activity_type": event.type,
                "activity_level": event.level.value,
                "deal_id": event.deal_id,
                "customer_id": event.customer_id,
                "user_id": event.user_id,
                "occurred_at": event.occurred_at.isoformat(),
                "metadata": event.metadata,
            },
        )
