"""Record store orchestrating primary, fallback, backups, and events.

Every operation goes to the primary backend first. An ``UNAVAILABLE``
result is logged and the same logical operation is retried exactly once
against the fallback backend. Whichever backend succeeds is authoritative for
that operation; results from the two are never merged.

After a successful mutation the store snapshots the full collection as seen
through the backend that served it, then publishes the lifecycle event, then
returns. "Not found" returns ``None`` with neither snapshot nor event.
So N successful mutations leave N snapshots, except when the serving backend
cannot be listed right after its mutation: that snapshot is skipped with an
error log while the event is still published.

Only ``ValidationError`` and ``StorageFault`` ever reach the caller.
"""

import logging
from collections.abc import Callable

from recvault.config import Settings
from recvault.core.models import Backend, BackupInfo, Record, RecordId
from recvault.core.sorting import newest_first
from recvault.core.validators import validate_fields
from recvault.exceptions import BackendUnavailable
from recvault.storage.backends.base import RecordBackend
from recvault.storage.backends.filesystem import JsonFileBackend
from recvault.storage.backends.mongodb import MongoBackend, MongoConnection
from recvault.storage.backup import BackupManager
from recvault.storage.events import EventBus, EventType
from recvault.storage.results import BackendResult, ResultStatus

logger = logging.getLogger(__name__)

Operation = Callable[[RecordBackend], BackendResult]


class RecordStore:
    """Backend-agnostic record operations with transparent fallback.

    Each successful add, update or delete writes one snapshot. The one
    exception is a serving backend that fails to list right after the
    mutation: the snapshot is then skipped and logged as an error.
    """

    def __init__(
        self,
        primary: RecordBackend,
        fallback: RecordBackend,
        backups: BackupManager,
        events: EventBus | None = None,
    ):
        self.primary = primary
        self.fallback = fallback
        self.backups = backups
        self.events = events or EventBus()
        self.last_source: Backend | None = None

    @classmethod
    def from_settings(
        cls, settings: Settings, events: EventBus | None = None
    ) -> "RecordStore":
        """Build a store wired to MongoDB and the local JSON file."""
        connection = MongoConnection(
            uri=settings.mongodb_uri,
            collection=settings.collection,
            connect_timeout_ms=settings.connect_timeout_ms,
            socket_timeout_ms=settings.socket_timeout_ms,
        )
        return cls(
            primary=MongoBackend(connection),
            fallback=JsonFileBackend(settings.records_file),
            backups=BackupManager(settings.backup_dir),
            events=events,
        )

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.disconnect()

    # Operation contract

    def add_record(self, name: str, value: str) -> Record:
        """Validate and store a new record."""
        name, value = validate_fields(name, value)
        served = self._dispatch("add", lambda b: b.add(name, value))
        return self._commit(*served, EventType.RECORD_ADDED)

    def list_records(self) -> list[Record]:
        """All records from whichever backend answers, newest first."""
        result, _ = self._dispatch("list", lambda b: b.list())
        return newest_first(result.records)

    def update_record(
        self, record_id: RecordId, name: str, value: str
    ) -> Record | None:
        """Replace name and value; ``None`` if the record does not exist."""
        name, value = validate_fields(name, value)
        served = self._dispatch(
            "update", lambda b: b.update(record_id, name, value)
        )
        return self._commit(*served, EventType.RECORD_UPDATED)

    def delete_record(self, record_id: RecordId) -> Record | None:
        """Remove a record; ``None`` if it does not exist."""
        served = self._dispatch("delete", lambda b: b.delete(record_id))
        return self._commit(*served, EventType.RECORD_DELETED)

    def list_backups(self) -> list[BackupInfo]:
        """Snapshot metadata, newest first."""
        return self.backups.list_backups()

    def disconnect(self) -> None:
        """Tear down backend connections."""
        self.primary.close()
        self.fallback.close()

    # Dispatch

    def _dispatch(
        self, action: str, operation: Operation
    ) -> tuple[BackendResult, RecordBackend]:
        backend = self.primary
        result = operation(backend)

        if result.status is ResultStatus.UNAVAILABLE:
            logger.warning(
                f"Primary backend unavailable for {action} ({result.error}); "
                "falling back to local file"
            )
            backend = self.fallback
            result = operation(backend)

        if result.status is ResultStatus.UNAVAILABLE:
            # Nothing further to fall back to
            raise BackendUnavailable(
                f"No backend could serve {action}: {result.error}"
            )

        self.last_source = backend.kind
        logger.debug(f"{action} served by {backend.kind.value} backend")
        return result, backend

    def _commit(
        self, result: BackendResult, backend: RecordBackend, event_type: EventType
    ) -> Record | None:
        if result.status is ResultStatus.NOT_FOUND:
            return None

        record = result.record
        assert record is not None
        self._snapshot(backend)
        self.events.publish(event_type, record)
        return record

    def _snapshot(self, backend: RecordBackend) -> None:
        view = backend.list()
        if not view.success:
            logger.error(
                f"Skipping backup: {backend.kind.value} backend could not list "
                f"records ({view.error})"
            )
            return
        self.backups.snapshot(newest_first(view.records))
