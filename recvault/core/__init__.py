"""Core record models, validation, and query helpers.

Key components:
- Record: Backend-agnostic record with explicit provenance
- RecordId: Tagged identity, never equal across backends
- validate_fields: Pre-condition check for name/value pairs
"""

from .models import Backend, BackupInfo, Record, RecordId
from .validators import ValidationError, validate_fields

__all__ = [
    "Backend",
    "BackupInfo",
    "Record",
    "RecordId",
    "ValidationError",
    "validate_fields",
]
