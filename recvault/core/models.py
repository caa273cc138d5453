"""Core data models for vault records.

Records reach callers from two storage backends that do not share an
identity scheme. MongoDB issues 24-character hex ObjectIds while the local
JSON file issues integer ids derived from the creation instant. Rather than
coercing one into the other, identity is a tagged value: ``RecordId`` carries
the backend kind alongside the raw value, so ids minted by different backends
never compare equal.

Key components:
- Backend: Which storage backend minted an id or served a result
- RecordId: Tagged record identity
- Record: Immutable, backend-agnostic record with explicit provenance
- BackupInfo: Metadata describing one snapshot file on disk
"""

import enum
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import msgspec

_OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")


class Backend(enum.Enum):
    """Storage backend kinds."""

    PRIMARY = "primary"
    FALLBACK = "fallback"

    @property
    def label(self) -> str:
        """Human-readable storage name."""
        return "mongodb" if self is Backend.PRIMARY else "file"


class RecordId(msgspec.Struct, frozen=True):
    """Record identity tagged with the backend that issued it."""

    kind: Backend
    value: str | int

    @classmethod
    def primary(cls, value: Any) -> "RecordId":
        return cls(Backend.PRIMARY, str(value))

    @classmethod
    def fallback(cls, value: int) -> "RecordId":
        return cls(Backend.FALLBACK, int(value))

    @classmethod
    def parse(cls, text: str) -> "RecordId":
        """Parse an identifier typed by a user.

        Args:
            text: Raw identifier text.

        Returns:
            A primary id for 24-character hex strings, a fallback id for
            all-digit strings.

        Raises:
            ValueError: If the text matches neither form.
        """
        text = (text or "").strip()
        if _OBJECT_ID_RE.match(text):
            return cls.primary(text.lower())
        if text.isdigit():
            return cls.fallback(int(text))
        raise ValueError(f"Not a valid record id: {text!r}")

    def __str__(self) -> str:
        return str(self.value)


class Record(msgspec.Struct, frozen=True, kw_only=True):
    """A stored name/value pair.

    The shape is identical whichever backend produced it. ``source`` names the
    backend that served the operation returning this record.
    """

    id: RecordId
    name: str
    value: str
    created_at: datetime
    source: Backend

    def to_dict(self) -> dict[str, Any]:
        """Serializable form used by snapshots and exports."""
        return {
            "id": self.id.value,
            "name": self.name,
            "value": self.value,
            "createdAt": isoformat(self.created_at),
            "source": self.source.value,
        }


class BackupInfo(msgspec.Struct, frozen=True, kw_only=True):
    """Metadata for a snapshot file."""

    filename: str
    path: Path
    created: datetime
    size: int


def utcnow() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def created_from_millis(millis: int) -> datetime:
    """Creation instant encoded in a fallback id."""
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def isoformat(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )
