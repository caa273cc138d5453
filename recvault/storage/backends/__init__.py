"""Pluggable record backends.

- **MongoBackend**: Remote MongoDB collection, the preferred store
- **JsonFileBackend**: Single JSON file on local disk, used as fallback
- **MemoryBackend**: In-process store for testing

All backends report outcomes through ``BackendResult``.
"""

from .base import RecordBackend
from .filesystem import JsonFileBackend
from .memory import MemoryBackend
from .mongodb import MongoBackend, MongoConnection

__all__ = [
    "JsonFileBackend",
    "MemoryBackend",
    "MongoBackend",
    "MongoConnection",
    "RecordBackend",
]
