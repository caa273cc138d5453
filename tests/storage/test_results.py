"""Tests for backend result types."""

from recvault.core.models import Backend
from recvault.storage.results import BackendResult, ResultStatus


class TestBackendResult:
    def test_ok(self):
        result = BackendResult.ok(Backend.PRIMARY, records=[])
        assert result.success is True
        assert result.source is Backend.PRIMARY
        assert result.record is None
        assert result.records == []

    def test_failures(self):
        assert BackendResult.not_found(Backend.FALLBACK).success is False
        unavailable = BackendResult.unavailable(Backend.PRIMARY, "timeout")
        assert unavailable.status is ResultStatus.UNAVAILABLE
        assert unavailable.error == "timeout"

    def test_records_are_copied(self):
        source = []
        result = BackendResult.ok(Backend.PRIMARY, records=source)
        source.append("x")
        assert result.records == []
