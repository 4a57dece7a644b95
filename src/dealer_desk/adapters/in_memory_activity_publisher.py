from __future__ import annotations

from dealer_desk.domain.activity import ActivityEvent
from dealer_desk.ports.activity_publisher import ActivityPublisher


class InMemoryActivityPublisher(ActivityPublisher):
    """Collects published events in order. Used by tests and local runs."""

    def __init__(self) -> None:
        self.events: list[ActivityEvent] = []

    def publish(self, event: ActivityEvent) -> None:
        self.events.append(event)
