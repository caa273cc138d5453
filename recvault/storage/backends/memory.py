"""In-memory record backend for testing."""

from datetime import timedelta

from bson import ObjectId

from recvault.core.models import Backend, Record, RecordId, utcnow
from recvault.storage.results import BackendResult

from .base import RecordBackend


class MemoryBackend(RecordBackend):
    """In-process stand-in for the MongoDB backend.

    Issues ObjectId identities, lists newest-first, and rejects identifiers of
    the other kind as unavailable, like the real thing.
    Setting ``online`` to False makes every operation report ``UNAVAILABLE``.
    """

    def __init__(self, kind: Backend = Backend.PRIMARY):
        self._kind = kind
        self._records: dict[RecordId, Record] = {}
        self.online = True
        self.calls: list[str] = []
        self.closed = False

    @property
    def kind(self) -> Backend:
        return self._kind

    def add(self, name: str, value: str) -> BackendResult:
        if unavailable := self._check("add"):
            return unavailable
        created = utcnow()
        # Keep creation instants distinct for stable newest-first ordering
        latest = max((r.created_at for r in self._records.values()), default=None)
        if latest is not None and created <= latest:
            created = latest + timedelta(milliseconds=1)
        record = Record(
            id=self._new_id(),
            name=name,
            value=value,
            created_at=created,
            source=self._kind,
        )
        self._records[record.id] = record
        return BackendResult.ok(self._kind, record=record)

    def list(self) -> BackendResult:
        if unavailable := self._check("list"):
            return unavailable
        records = sorted(
            self._records.values(), key=lambda r: r.created_at, reverse=True
        )
        return BackendResult.ok(self._kind, records=records)

    def update(self, record_id: RecordId, name: str, value: str) -> BackendResult:
        if unavailable := self._check("update", record_id):
            return unavailable
        current = self._records.get(record_id)
        if current is None:
            return BackendResult.not_found(self._kind)
        updated = Record(
            id=current.id,
            name=name,
            value=value,
            created_at=current.created_at,
            source=self._kind,
        )
        self._records[record_id] = updated
        return BackendResult.ok(self._kind, record=updated)

    def delete(self, record_id: RecordId) -> BackendResult:
        if unavailable := self._check("delete", record_id):
            return unavailable
        current = self._records.pop(record_id, None)
        if current is None:
            return BackendResult.not_found(self._kind)
        return BackendResult.ok(self._kind, record=current)

    def close(self) -> None:
        self.closed = True

    def get_size(self) -> int:
        """Get the number of stored records."""
        return len(self._records)

    def _check(
        self, action: str, record_id: RecordId | None = None
    ) -> BackendResult | None:
        self.calls.append(action)
        if not self.online:
            return BackendResult.unavailable(self._kind, f"{action}: backend offline")
        if record_id is not None and not self.owns(record_id):
            return BackendResult.unavailable(
                self._kind, f"{action}: unsupported identifier {record_id}"
            )
        return None

    def _new_id(self) -> RecordId:
        if self._kind is Backend.PRIMARY:
            return RecordId.primary(ObjectId())
        highest = max((int(key.value) for key in self._records), default=0)
        return RecordId.fallback(highest + 1)
