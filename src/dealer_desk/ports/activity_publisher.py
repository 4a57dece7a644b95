from __future__ import annotations

from abc import ABC, abstractmethod

from dealer_desk.domain.activity import ActivityEvent


class ActivityPublisher(ABC):
    """
    Port for the activity feed (audit trail and live subscribers).

    Delivery is best-effort: callers log a failed publish and move on,
    they never roll back the change that produced the event.
    """

    @abstractmethod
    def publish(self, event: ActivityEvent) -> None:
        ...
