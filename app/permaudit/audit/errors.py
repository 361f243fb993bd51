"""Exceptions raised while auditing a directory tree."""


class AuditError(Exception):
    """Base exception for audit-related errors."""


class BaseDirectoryError(AuditError):
    """Raised when the base directory is missing, not a directory, or unreadable."""
