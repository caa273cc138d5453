"""Tests shared by every record backend."""

import inspect
import typing

import pytest

from recvault.storage.backends import (
    JsonFileBackend,
    MemoryBackend,
    MongoBackend,
    RecordBackend,
)


@pytest.mark.parametrize(
    "backend_class", [RecordBackend, JsonFileBackend, MemoryBackend, MongoBackend]
)
def test_annotations_resolve(backend_class):
    """Method annotations name builtins, not backend methods such as ``list``."""
    for name, method in inspect.getmembers(backend_class, inspect.isfunction):
        hints = typing.get_type_hints(method)
        for hint in hints.values():
            assert not inspect.isfunction(hint), f"{name} annotated with a function"
