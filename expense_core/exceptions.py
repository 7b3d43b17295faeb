"""Domain-specific exceptions for the expense record store and analytics."""

class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class StorageError(IOError):
    """Raised when the persistence layer cannot read, write or serialise a blob."""
