"""Event system for record lifecycle notifications."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from recvault.core.models import Record, utcnow

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events that can occur."""

    RECORD_ADDED = "recordAdded"
    RECORD_UPDATED = "recordUpdated"
    RECORD_DELETED = "recordDeleted"

    @property
    def wire_name(self) -> str:
        return self.value


@dataclass
class Event:
    """A committed record mutation."""

    type: EventType
    record: Record
    timestamp: datetime = field(default_factory=utcnow)


Handler = Callable[[Event], None]


class EventBus:
    """Synchronous in-process publish/subscribe.

    Handlers run in registration order before ``publish`` returns. Handlers
    subscribed with ``subscribe_all`` share the same ordering as typed ones.
    A failing handler is logged and skipped.
    """

    def __init__(self):
        self._subscribers: list[tuple[EventType | None, Handler]] = []

    def subscribe(self, event_type: EventType, handler: Handler) -> None:
        """Subscribe to events of a specific type."""
        self._subscribers.append((event_type, handler))

    def subscribe_all(self, handler: Handler) -> None:
        """Subscribe to every event type."""
        self._subscribers.append((None, handler))

    def unsubscribe(self, event_type: EventType | None, handler: Handler) -> None:
        """Unsubscribe a handler registered for ``event_type``."""
        try:
            self._subscribers.remove((event_type, handler))
        except ValueError:
            pass

    def publish(self, event_type: EventType, record: Record) -> Event:
        """Publish an event to all matching subscribers."""
        event = Event(type=event_type, record=record)

        # Snapshot so handlers may (un)subscribe while being notified
        for subscribed_type, handler in list(self._subscribers):
            if subscribed_type is not None and subscribed_type is not event_type:
                continue
            try:
                handler(event)
            except Exception:
                logger.exception(
                    f"Subscriber {handler!r} failed on {event_type.wire_name}"
                )

        return event


def log_events(bus: EventBus, log: logging.Logger | None = None) -> Handler:
    """Attach a subscriber that writes every event to the log."""
    target = log or logging.getLogger("recvault.events")

    def handler(event: Event) -> None:
        record = event.record
        target.info(
            f"{event.type.wire_name}: id={record.id} name={record.name} "
            f"source={record.source.value}"
        )

    bus.subscribe_all(handler)
    return handler
