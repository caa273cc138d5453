"""Local JSON file backend.

The whole collection lives in one file as a JSON array of
``{"id": int, "name": str, "value": str}`` objects. Every mutation reads the
full array, changes it in memory, and replaces the file.
"""

import json
import logging
import tempfile
import threading
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from recvault.core.models import Backend, Record, RecordId, created_from_millis
from recvault.exceptions import StorageFault
from recvault.storage.results import BackendResult

from .base import RecordBackend

logger = logging.getLogger(__name__)


class JsonFileBackend(RecordBackend):
    """Single-file record storage used when MongoDB is unreachable.

    Identifiers are epoch milliseconds of the creation instant, bumped so they
    stay strictly increasing within this process and above every id already
    in the file. They are not unique across processes or under clock skew.

    Mutations are unlocked read-modify-write cycles over the whole file. Two
    writers that interleave can lose one of their updates: the second rename
    wins. Readers never see a partial file because each write goes to a
    temporary file in the same directory that is then renamed over the
    target.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._id_lock = threading.Lock()
        self._last_id = 0

    @property
    def kind(self) -> Backend:
        return Backend.FALLBACK

    # Raw collection access

    def read(self) -> list[Record]:
        """Load every record in file order; a missing file is empty."""
        if not self.path.exists():
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StorageFault(self.path, f"corrupt JSON: {e}") from e
        except OSError as e:
            raise StorageFault(self.path, str(e)) from e

        if not isinstance(data, list):
            raise StorageFault(self.path, "expected a JSON array of records")

        return [self._to_record(item) for item in data]

    def write(self, records: list[Record]) -> None:
        """Replace the file with ``records``."""
        payload = [self._to_document(r) for r in records]

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
        except OSError as e:
            raise StorageFault(self.path, str(e)) from e

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)

            Path(temp_path).replace(self.path)
        except OSError as e:
            Path(temp_path).unlink(missing_ok=True)
            raise StorageFault(self.path, str(e)) from e
        except Exception:
            Path(temp_path).unlink(missing_ok=True)
            raise

    # Record operations

    def add(self, name: str, value: str) -> BackendResult:
        records = self.read()
        record_id = self._next_id(records)
        record = Record(
            id=RecordId.fallback(record_id),
            name=name,
            value=value,
            created_at=created_from_millis(record_id),
            source=Backend.FALLBACK,
        )
        records.append(record)
        self.write(records)
        logger.debug(f"Added record {record_id} to {self.path}")
        return BackendResult.ok(Backend.FALLBACK, record=record)

    def list(self) -> BackendResult:
        return BackendResult.ok(Backend.FALLBACK, records=self.read())

    def update(self, record_id: RecordId, name: str, value: str) -> BackendResult:
        if not self.owns(record_id):
            return BackendResult.not_found(Backend.FALLBACK)

        records = self.read()
        for index, current in enumerate(records):
            if current.id == record_id:
                updated = Record(
                    id=current.id,
                    name=name,
                    value=value,
                    created_at=current.created_at,
                    source=Backend.FALLBACK,
                )
                records[index] = updated
                self.write(records)
                return BackendResult.ok(Backend.FALLBACK, record=updated)

        return BackendResult.not_found(Backend.FALLBACK)

    def delete(self, record_id: RecordId) -> BackendResult:
        if not self.owns(record_id):
            return BackendResult.not_found(Backend.FALLBACK)

        records = self.read()
        for index, current in enumerate(records):
            if current.id == record_id:
                del records[index]
                self.write(records)
                return BackendResult.ok(Backend.FALLBACK, record=current)

        return BackendResult.not_found(Backend.FALLBACK)

    def close(self) -> None:
        """No resources to close for the file backend."""
        pass

    # Helpers

    def _next_id(self, records: Sequence[Record]) -> int:
        """Millisecond timestamp, strictly above anything issued or stored."""
        highest = max((int(r.id.value) for r in records), default=0)
        with self._id_lock:
            candidate = max(int(time.time() * 1000), self._last_id + 1, highest + 1)
            self._last_id = candidate
        return candidate

    def _to_record(self, item: Any) -> Record:
        if not isinstance(item, dict):
            raise StorageFault(self.path, f"record is not an object: {item!r}")

        raw_id = item.get("id")
        name = item.get("name")
        value = item.get("value")
        if isinstance(raw_id, bool) or not isinstance(raw_id, int):
            raise StorageFault(self.path, f"record id is not an integer: {raw_id!r}")
        if not isinstance(name, str) or not isinstance(value, str):
            raise StorageFault(self.path, f"record {raw_id} has non-string fields")

        try:
            created = created_from_millis(raw_id)
        except (OverflowError, OSError, ValueError) as e:
            raise StorageFault(self.path, f"record id {raw_id} is out of range") from e

        return Record(
            id=RecordId.fallback(raw_id),
            name=name,
            value=value,
            created_at=created,
            source=Backend.FALLBACK,
        )

    @staticmethod
    def _to_document(record: Record) -> dict[str, Any]:
        return {"id": int(record.id.value), "name": record.name, "value": record.value}
