import logging
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from dealer_desk.adapters.in_memory_activity_publisher import InMemoryActivityPublisher
from dealer_desk.domain.activity import ActivityCategory, ActivityEvent
from dealer_desk.use_cases.notify import publish_activity

EVENT = ActivityEvent(
    category=ActivityCategory.DEAL,
    type="DEAL_CREATED",
    message="Pencil Created: $100/mo for stock-1",
    occurred_at=datetime(2026, 5, 1, tzinfo=timezone.utc),
    deal_id="deal-1",
)


def test_publishes_event() -> None:
    publisher = InMemoryActivityPublisher()

    assert publish_activity(publisher, EVENT) is True
    assert publisher.events == [EVENT]


def test_no_publisher_configured() -> None:
    assert publish_activity(None, EVENT) is False


def test_publisher_failure_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    publisher = Mock()
    publisher.publish.side_effect = ConnectionError("feed down")

    with caplog.at_level(logging.WARNING, logger="dealer_desk.use_cases.notify"):
        assert publish_activity(publisher, EVENT) is False

    [record] = caplog.records
    assert record.getMessage() == "Activity publish failed"
    assert record.activity_type == "DEAL_CREATED"
    assert record.exc_info is not None
