"""Tests for the event system."""

import logging
from datetime import datetime, timezone

import pytest

from recvault.core.models import Backend, Record, RecordId
from recvault.storage.events import Event, EventBus, EventType, log_events


@pytest.fixture
def record():
    return Record(
        id=RecordId.fallback(1709294400000),
        name="wifi",
        value="secret1",
        created_at=datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
        source=Backend.FALLBACK,
    )


class TestEventType:
    def test_wire_names(self):
        assert EventType.RECORD_ADDED.wire_name == "recordAdded"
        assert EventType.RECORD_UPDATED.wire_name == "recordUpdated"
        assert EventType.RECORD_DELETED.wire_name == "recordDeleted"


class TestEventBus:
    """Test the event bus publish/subscribe system."""

    def test_subscriber_receives_event(self, record):
        bus = EventBus()
        received = []
        bus.subscribe(EventType.RECORD_ADDED, received.append)

        event = bus.publish(EventType.RECORD_ADDED, record)

        assert received == [event]
        assert event.record is record
        assert event.type is EventType.RECORD_ADDED
        assert isinstance(event, Event)

    def test_only_matching_type(self, record):
        bus = EventBus()
        received = []
        bus.subscribe(EventType.RECORD_DELETED, received.append)

        bus.publish(EventType.RECORD_ADDED, record)

        assert received == []

    def test_registration_order(self, record):
        bus = EventBus()
        calls = []
        bus.subscribe(EventType.RECORD_ADDED, lambda e: calls.append("first"))
        bus.subscribe_all(lambda e: calls.append("all"))
        bus.subscribe(EventType.RECORD_ADDED, lambda e: calls.append("third"))

        bus.publish(EventType.RECORD_ADDED, record)

        assert calls == ["first", "all", "third"]

    def test_failing_subscriber_isolated(self, record, caplog):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(EventType.RECORD_UPDATED, broken)
        bus.subscribe(EventType.RECORD_UPDATED, received.append)

        with caplog.at_level(logging.ERROR, logger="recvault.storage.events"):
            bus.publish(EventType.RECORD_UPDATED, record)

        assert len(received) == 1
        assert "recordUpdated" in caplog.text

    def test_unsubscribe(self, record):
        bus = EventBus()
        received = []
        bus.subscribe(EventType.RECORD_ADDED, received.append)
        bus.unsubscribe(EventType.RECORD_ADDED, received.append)
        bus.unsubscribe(EventType.RECORD_ADDED, received.append)

        bus.publish(EventType.RECORD_ADDED, record)

        assert received == []

    def test_subscribe_during_publish(self, record):
        """Handlers added while publishing see only later events."""
        bus = EventBus()
        late = []

        def register(event):
            bus.subscribe(EventType.RECORD_ADDED, late.append)

        bus.subscribe(EventType.RECORD_ADDED, register)
        bus.publish(EventType.RECORD_ADDED, record)
        assert late == []

        bus.publish(EventType.RECORD_ADDED, record)
        assert len(late) == 1


class TestLogEvents:
    def test_logs_every_event(self, record, caplog):
        bus = EventBus()
        log_events(bus)

        with caplog.at_level(logging.INFO, logger="recvault.events"):
            bus.publish(EventType.RECORD_ADDED, record)
            bus.publish(EventType.RECORD_DELETED, record)

        assert "recordAdded: id=1709294400000 name=wifi source=fallback" in caplog.text
        assert "recordDeleted" in caplog.text
