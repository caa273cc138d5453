"""Append-only snapshots of the record collection.

Each successful mutation produces one file::

    backups/backup_2026-10-19T08-15-02-417Z.json

holding ``{"timestamp", "totalRecords", "records"}``. Existing snapshots are
never rewritten, merged, or removed.
"""

import json
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from recvault.core.models import BackupInfo, Record, isoformat, utcnow
from recvault.exceptions import StorageFault

logger = logging.getLogger(__name__)

PREFIX = "backup_"
SUFFIX = ".json"


def snapshot_filename(moment: datetime, sequence: int = 0) -> str:
    """File name for a snapshot taken at ``moment``.

    Characters that are illegal in file names on some platforms are replaced
    with ``-``. A non-zero ``sequence`` disambiguates snapshots taken within
    the same millisecond.
    """
    stamp = isoformat(moment).replace(":", "-").replace(".", "-")
    if sequence:
        return f"{PREFIX}{stamp}_{sequence}{SUFFIX}"
    return f"{PREFIX}{stamp}{SUFFIX}"


class BackupManager:
    """Writes and lists snapshot files."""

    def __init__(self, backup_dir: Path):
        self.backup_dir = Path(backup_dir)

    def snapshot(self, records: Sequence[Record]) -> Path:
        """Write a new snapshot of ``records`` and return its path."""
        moment = utcnow()
        payload = {
            "timestamp": isoformat(moment),
            "totalRecords": len(records),
            "records": [r.to_dict() for r in records],
        }
        content = json.dumps(payload, indent=2, ensure_ascii=False)

        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            path = self._write_exclusive(moment, content)
        except OSError as e:
            raise StorageFault(self.backup_dir, f"snapshot failed: {e}") from e

        logger.info(f"Backup created: {path}")
        return path

    def list_backups(self) -> list[BackupInfo]:
        """List snapshots, newest first."""
        if not self.backup_dir.exists():
            return []

        backups = []
        for path in self.backup_dir.glob(f"{PREFIX}*{SUFFIX}"):
            if not path.is_file():
                continue
            stat = path.stat()
            backups.append(
                BackupInfo(
                    filename=path.name,
                    path=path,
                    created=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                    size=stat.st_size,
                )
            )

        backups.sort(key=_sort_key, reverse=True)
        return backups

    def load(self, filename: str) -> dict[str, Any]:
        """Read one snapshot back."""
        path = self.backup_dir / Path(filename).name
        if not path.exists():
            raise ValueError(f"Backup not found: {filename}")
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageFault(path, str(e)) from e

    def _write_exclusive(self, moment: datetime, content: str) -> Path:
        sequence = 0
        while True:
            path = self.backup_dir / snapshot_filename(moment, sequence)
            try:
                with open(path, "x", encoding="utf-8") as f:
                    f.write(content)
                return path
            except FileExistsError:
                sequence += 1


def _sort_key(info: BackupInfo) -> tuple[datetime, str, int]:
    stem = info.filename[len(PREFIX) : -len(SUFFIX)]
    stamp, _, sequence = stem.partition("_")
    return (info.created, stamp, int(sequence) if sequence.isdigit() else 0)
