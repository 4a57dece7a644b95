from __future__ import annotations

import logging

from dealer_desk.domain.activity import ActivityEvent
from dealer_desk.ports.activity_publisher import ActivityPublisher

logger = logging.getLogger(__name__)


def publish_activity(publisher: ActivityPublisher | None, event: ActivityEvent) -> bool:
    """
    Hand an event to the activity feed, best-effort.

    A publisher failure is logged and reported as False; the change that
    produced the event has already been persisted and stays that way.
    """
    if publisher is None:
        return False
    try:
        publisher.publish(event)
    except Exception:
        logger.warning(
            "Activity publish failed",
            exc_info=True,
            extra={"activity_type": event.type, "deal_id": event.deal_id},
        )
        return False
    return True
