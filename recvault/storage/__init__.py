"""Record persistence layer.

Provides a single store interface over two backends:

- **Primary**: MongoDB, preferred whenever it answers
- **Fallback**: A local JSON file used when MongoDB is unreachable
- **Backups**: An append-only snapshot after every successful mutation
- **Events**: Synchronous notifications for committed mutations
"""

from recvault.storage.backends import (
    JsonFileBackend,
    MemoryBackend,
    MongoBackend,
    MongoConnection,
    RecordBackend,
)
from recvault.storage.backup import BackupManager
from recvault.storage.events import Event, EventBus, EventType, log_events
from recvault.storage.results import BackendResult, ResultStatus
from recvault.storage.store import RecordStore

__all__ = [
    # Backends
    "RecordBackend",
    "JsonFileBackend",
    "MemoryBackend",
    "MongoBackend",
    "MongoConnection",
    # Results
    "BackendResult",
    "ResultStatus",
    # Backups
    "BackupManager",
    # Events
    "Event",
    "EventBus",
    "EventType",
    "log_events",
    # Orchestrator
    "RecordStore",
]
