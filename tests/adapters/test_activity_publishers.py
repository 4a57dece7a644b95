from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

from dealer_desk.adapters.in_memory_activity_publisher import InMemoryActivityPublisher
from dealer_desk.adapters.logging_activity_publisher import LoggingActivityPublisher
from dealer_desk.domain.activity import ActivityCategory, ActivityEvent, ActivityLevel


@pytest.fixture
def event() -> ActivityEvent:
    return ActivityEvent(
        category=ActivityCategory.DEAL,
        type="DEAL_CREATED",
        message="Pencil Created: $483/mo for stock-9",
        occurred_at=datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc),
        user_id="user-7",
        customer_id="cust-1",
        deal_id="deal-1",
        level=ActivityLevel.INFO,
        metadata={"monthly_payment": "483.32"},
    )


def test_in_memory_publisher_keeps_order(event: ActivityEvent) -> None:
    publisher = InMemoryActivityPublisher()
    second = ActivityEvent(
        category=ActivityCategory.DEAL,
        type="STATUS_UPDATED",
        message="Deal status updated to CANCELLED",
        occurred_at=event.occurred_at,
    )

    publisher.publish(event)
    publisher.publish(second)

    assert publisher.events == [event, second]


def test_logging_publisher_writes_structured_record(
    event: ActivityEvent, caplog: pytest.LogCaptureFixture
) -> None:
    publisher = LoggingActivityPublisher(log=logging.getLogger("dealer_desk.test.activity"))

    with caplog.at_level(logging.INFO, logger="dealer_desk.test.activity"):
        publisher.publish(event)

    [record] = caplog.records
    assert record.getMessage() == "Pencil Created: $483/mo for stock-9"
    assert record.activity_category == "DEAL"
    assert record.activity_type == "DEAL_CREATED"
    assert record.activity_level == "info"
    assert record.deal_id == "deal-1"
    assert record.occurred_at == "2026-05-01T12:00:00+00:00"
    assert record.metadata == {"monthly_payment": "483.32"}
