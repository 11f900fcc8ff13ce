"""Error classes of the permstore package."""

from __future__ import annotations


class PermStoreError(Exception):
    """Base class for all permstore errors."""


class InvalidPathError(PermStoreError, ValueError):
    """Raised when a path is malformed, e.g. contains an empty segment."""


class ReservedNameError(PermStoreError, KeyError):
    """Raised when a path segment collides with an intrinsic store attribute."""

    def __str__(self) -> str:
        # KeyError would otherwise quote the message
        return str(self.args[0]) if self.args else ""


class PermissionDeniedError(PermStoreError, PermissionError):
    """Raised when the permission of a field forbids the requested operation.

    Args:
        path: Path the operation was issued for.
        operation: Either "read" or "write".
    """

    def __init__(self, path: str, operation: str):
        super().__init__(f"Cannot {operation} '{path}': permission denied.")
        self.path = path
        self.operation = operation


class NotAStoreError(PermStoreError, TypeError):
    """Raised when a path can not be traversed because an entry is no store."""
