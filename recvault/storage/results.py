"""Result types returned by storage backends.

Backends report outcomes as values instead of raising. The orchestrator
dispatches on ``status``, which keeps the fall-back-once policy an explicit
state transition.
"""

from dataclasses import dataclass, field
from enum import Enum

from recvault.core.models import Backend, Record


class ResultStatus(Enum):
    """Outcome of a backend operation."""

    OK = "ok"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"

    def is_success(self) -> bool:
        """Check if status indicates success."""
        return self is ResultStatus.OK


@dataclass
class BackendResult:
    """Result of a single backend operation."""

    status: ResultStatus
    source: Backend | None = None
    record: Record | None = None
    records: list[Record] = field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        """Check if the operation succeeded."""
        return self.status.is_success()

    @classmethod
    def ok(
        cls,
        source: Backend,
        record: Record | None = None,
        records: list[Record] | None = None,
    ) -> "BackendResult":
        return cls(
            status=ResultStatus.OK,
            source=source,
            record=record,
            records=list(records or []),
        )

    @classmethod
    def not_found(cls, source: Backend) -> "BackendResult":
        return cls(status=ResultStatus.NOT_FOUND, source=source)

    @classmethod
    def unavailable(cls, source: Backend, error: str) -> "BackendResult":
        return cls(status=ResultStatus.UNAVAILABLE, source=source, error=error)
