"""Base record backend interface."""

from abc import ABC, abstractmethod

from recvault.core.models import Backend, RecordId
from recvault.storage.results import BackendResult


class RecordBackend(ABC):
    """Abstract base class for record backends.

    Every operation returns a ``BackendResult``; backends never raise for
    "not found". Only the fallback backend raises, and only ``StorageFault``.
    """

    @property
    @abstractmethod
    def kind(self) -> Backend:
        """Backend kind used for identities and provenance."""
        pass

    @abstractmethod
    def add(self, name: str, value: str) -> BackendResult:
        """Insert a record and return it with a fresh identity."""
        pass

    @abstractmethod
    def list(self) -> BackendResult:
        """Return every stored record."""
        pass

    @abstractmethod
    def update(self, record_id: RecordId, name: str, value: str) -> BackendResult:
        """Replace name and value of the record with ``record_id``."""
        pass

    @abstractmethod
    def delete(self, record_id: RecordId) -> BackendResult:
        """Remove the record with ``record_id`` and return it."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release backend resources."""
        pass

    def owns(self, record_id: RecordId) -> bool:
        """Check if ``record_id`` was minted by this backend kind."""
        return record_id.kind is self.kind
