"""Shared fixtures for storage tests."""

import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from recvault.storage.backends.filesystem import JsonFileBackend
from recvault.storage.backends.memory import MemoryBackend
from recvault.storage.backends.mongodb import MongoBackend, MongoConnection
from recvault.storage.backup import BackupManager
from recvault.storage.events import EventBus
from recvault.storage.store import RecordStore


@pytest.fixture
def temp_dir():
    """Temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def records_file(temp_dir):
    return temp_dir / "records.json"


@pytest.fixture
def file_backend(records_file):
    return JsonFileBackend(records_file)


@pytest.fixture
def primary():
    """In-memory stand-in for MongoDB, online."""
    return MemoryBackend()


@pytest.fixture
def backups(temp_dir):
    return BackupManager(temp_dir / "backups")


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def store(primary, file_backend, backups, events):
    return RecordStore(
        primary=primary, fallback=file_backend, backups=backups, events=events
    )


@pytest.fixture
def offline_store(store, primary):
    """Store whose primary reports every operation unavailable."""
    primary.online = False
    return store


@pytest.fixture
def mongo_collection():
    """Mock pymongo collection."""
    return MagicMock(name="collection")


@pytest.fixture
def mongo_client(mongo_collection):
    """Mock MongoClient whose default database holds ``mongo_collection``."""
    client = MagicMock(name="client")
    database = MagicMock(name="database")
    database.__getitem__.return_value = mongo_collection
    client.get_default_database.return_value = database
    client.__getitem__.return_value = database
    return client


@pytest.fixture
def client_factory(mongo_client):
    return MagicMock(name="MongoClient", return_value=mongo_client)


@pytest.fixture
def connection(client_factory):
    return MongoConnection(
        uri="mongodb://db.example:27017/vaultdb", client_factory=client_factory
    )


@pytest.fixture
def mongo_backend(connection):
    return MongoBackend(connection)
