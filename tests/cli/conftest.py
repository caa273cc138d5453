"""Pytest configuration and fixtures for CLI tests.

The CLI normally talks to MongoDB; here the store factory is replaced with
one that uses an in-memory primary and the real file fallback under a
temporary data directory.
"""

import pytest
from click.testing import CliRunner

from recvault.cli.main import cli
from recvault.storage.backends.filesystem import JsonFileBackend
from recvault.storage.backends.memory import MemoryBackend
from recvault.storage.backup import BackupManager
from recvault.storage.store import RecordStore


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "vault"


@pytest.fixture
def primary():
    """Shared across invocations so records persist between commands."""
    return MemoryBackend()


@pytest.fixture
def stores(monkeypatch, primary):
    """Stores built by CLI invocations, in order."""
    built = []

    def build_store(settings):
        store = RecordStore(
            primary=primary,
            fallback=JsonFileBackend(settings.records_file),
            backups=BackupManager(settings.backup_dir),
        )
        built.append(store)
        return store

    monkeypatch.setattr("recvault.cli.main.build_store", build_store)
    return built


@pytest.fixture
def invoke(runner, data_dir, stores):
    """Run the CLI against the temporary vault."""

    def run(*args, input=None):
        return runner.invoke(
            cli, ["--no-color", "--data-dir", str(data_dir), *args], input=input
        )

    return run


@pytest.fixture
def seeded(primary):
    """Primary holding three records, oldest first."""
    return [
        primary.add(name, value).record
        for name, value in [
            ("wifi", "secret1"),
            ("bank pin", "1234"),
            ("alarm", "9876"),
        ]
    ]
