"""Search, ordering, and summary helpers for record listings.

These operate on records already returned by the store and never touch a
backend. The store guarantees newest-first order for ``list_records``; the
helpers here let the CLI re-order or filter that list on request.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from .models import Backend, Record

SORT_FIELDS = ("name", "date")
SORT_ORDERS = ("ascending", "descending")


def newest_first(records: Iterable[Record]) -> list[Record]:
    """Order records by creation time, newest first.

    Ties are broken by id value, descending, so the order is total within a
    single backend.
    """
    return sorted(
        records,
        key=lambda r: (r.created_at, str(r.id.value).zfill(24)),
        reverse=True,
    )


def search_records(records: Iterable[Record], keyword: str) -> list[Record]:
    """Case-insensitive match on name, substring match on id."""
    needle = keyword.strip().lower()
    if not needle:
        return list(records)
    return [
        r for r in records if needle in r.name.lower() or needle in str(r.id.value)
    ]


def sort_records(
    records: Iterable[Record], field: str = "name", order: str = "ascending"
) -> list[Record]:
    """Sort records by name or creation date.

    Args:
        records: Records to sort.
        field: ``name`` or ``date``.
        order: ``ascending`` or ``descending``.

    Returns:
        A new sorted list.

    Raises:
        ValueError: On an unknown field or order.
    """
    if field not in SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {field}")
    if order not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order: {order}")

    reverse = order == "descending"
    if field == "name":
        return sorted(
            records, key=lambda r: (r.name.casefold(), r.name), reverse=reverse
        )
    return sorted(records, key=lambda r: r.created_at, reverse=reverse)


@dataclass
class VaultStatistics:
    """Summary figures for a record listing."""

    total: int
    storage: str
    earliest: datetime
    latest: datetime
    longest_name: str


def compute_statistics(records: Sequence[Record]) -> VaultStatistics | None:
    """Summarize a listing, or ``None`` when it is empty."""
    if not records:
        return None

    dates = [r.created_at for r in records]
    sources = {r.source for r in records}
    if len(sources) == 1:
        storage = next(iter(sources)).label
    else:
        storage = "mixed"

    longest = records[0]
    for record in records[1:]:
        if len(record.name) > len(longest.name):
            longest = record

    return VaultStatistics(
        total=len(records),
        storage=storage,
        earliest=min(dates),
        latest=max(dates),
        longest_name=longest.name,
    )


def storage_label(records: Sequence[Record], default: Backend | None = None) -> str:
    """Name of the backend that served a listing."""
    if records:
        return records[0].source.label
    if default is not None:
        return default.label
    return "unknown"
