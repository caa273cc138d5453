"""Shared fixtures for core tests."""

from datetime import datetime, timedelta, timezone

import pytest

from recvault.core.models import Backend, Record, RecordId


@pytest.fixture
def base_time():
    return datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_records(base_time):
    """Records from the fallback backend with staggered creation times."""
    records = []
    for offset, name in enumerate(["wifi", "Bank PIN", "alarm code", "locker"]):
        created = base_time + timedelta(days=offset)
        millis = int(created.timestamp() * 1000)
        records.append(
            Record(
                id=RecordId.fallback(millis),
                name=name,
                value=f"secret-{offset}",
                created_at=created,
                source=Backend.FALLBACK,
            )
        )
    return records
