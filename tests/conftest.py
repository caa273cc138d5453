"""Pytest configuration and fixtures."""

import os

import pytest


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Isolate environment variables for each test.

    Settings read MONGODB_URI and RECVAULT_DATA_DIR from the environment, so
    every test starts without them and with XDG paths pointing nowhere real.
    """
    original_env = os.environ.copy()

    monkeypatch.delenv("MONGODB_URI", raising=False)
    monkeypatch.delenv("RECVAULT_DATA_DIR", raising=False)

    yield

    os.environ.clear()
    os.environ.update(original_env)
