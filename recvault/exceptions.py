"""Exception classes for the record vault."""


class VaultError(Exception):
    """Base exception for vault errors."""

    pass


class ValidationError(VaultError, ValueError):
    """Raised when a record's name or value fails validation."""

    def __init__(self, field: str, message: str):
        """Initialize with field and message."""
        self.field = field
        self.message = message
        super().__init__(f"Validation error for {field}: {message}")


class BackendUnavailable(VaultError):
    """Raised when the primary backend cannot serve an operation."""

    pass


class StorageFault(VaultError):
    """Raised when the local fallback file cannot be read or written."""

    def __init__(self, path, message: str):
        """Initialize with the offending path and a message."""
        self.path = path
        super().__init__(f"Storage fault at {path}: {message}")
