"""Validation for record fields.

Validation runs before any backend is touched. Both fields are required and
must be non-empty once surrounding whitespace is removed; no length cap is
enforced.
"""

from typing import Any

from recvault.exceptions import ValidationError

REQUIRED_FIELDS = ("name", "value")


def validate_fields(name: Any, value: Any) -> tuple[str, str]:
    """Validate and normalize a name/value pair.

    Args:
        name: Record name as supplied by the caller.
        value: Record value as supplied by the caller.

    Returns:
        The trimmed ``(name, value)`` pair.

    Raises:
        ValidationError: If either field is missing, not a string, or blank.
    """
    cleaned = []
    for field, raw in zip(REQUIRED_FIELDS, (name, value)):
        if raw is None:
            raise ValidationError(field, f"{field.capitalize()} is required")
        if not isinstance(raw, str):
            raise ValidationError(field, f"{field.capitalize()} must be a string")
        text = raw.strip()
        if not text:
            raise ValidationError(field, f"{field.capitalize()} cannot be empty")
        cleaned.append(text)
    return cleaned[0], cleaned[1]


__all__ = ["REQUIRED_FIELDS", "ValidationError", "validate_fields"]
