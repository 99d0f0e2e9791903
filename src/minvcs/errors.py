"""
Error types for minvcs operations.

All errors are explicit and never silent.
"""

from pathlib import Path
from typing import Optional


class MinvcsError(Exception):
    """Base exception for all minvcs errors."""
    pass


class PathNotFoundError(MinvcsError):
    """Raised when a path to be stored does not exist."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(f"Path does not exist: {path}")


class OutOfScopeError(MinvcsError):
    """Raised when a path is not managed by the repository."""

    def __init__(self, path, root):
        self.path = Path(path)
        self.root = Path(root)
        super().__init__(f"Path is not managed by the repository at {root}: {path}")


class UnsupportedPathTypeError(MinvcsError):
    """Raised for paths that are neither regular files nor directories."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(f"Path is not a regular file or directory: {path}")


class StorageError(MinvcsError):
    """Raised when filesystem operations fail."""

    def __init__(self, operation: str, path, cause: Exception = None):
        self.operation = operation
        self.path = str(path)
        self.cause = cause
        msg = f"Storage error during {operation}: {path}"
        if cause:
            msg += f"\nCause: {cause}"
        super().__init__(msg)


class ObjectNotFoundError(MinvcsError):
    """Raised when a requested object does not exist."""

    def __init__(self, digest: str):
        self.digest = digest
        super().__init__(f"Object not found: {digest}")


class IntegrityError(MinvcsError):
    """Raised when a stored object's content does not match its digest."""

    def __init__(self, digest: str, actual: Optional[str] = None, detail: Optional[str] = None):
        self.digest = digest
        self.actual = actual
        self.detail = detail
        msg = f"Object integrity check failed: {digest}"
        if actual:
            msg += f"\nActual digest: {actual}"
        if detail:
            msg += f"\nDetail: {detail}"
        super().__init__(msg)


# Reasons carried by CorruptObjectError
MISSING_SEPARATOR = 'missing_separator'
MALFORMED_HEADER = 'malformed_header'
UNKNOWN_KIND = 'unknown_kind'
LENGTH_MISMATCH = 'length_mismatch'
MALFORMED_TREE_LINE = 'malformed_tree_line'
MALFORMED_SNAPSHOT = 'malformed_snapshot'
MALFORMED_HEAD = 'malformed_head'


class CorruptObjectError(MinvcsError):
    """Raised when an object's header or body is structurally invalid."""

    def __init__(self, reason: str, detail: str, digest: Optional[str] = None):
        self.reason = reason
        self.detail = detail
        self.digest = digest
        msg = f"Corrupt object ({reason}): {detail}"
        if digest:
            msg += f" (digest: {digest})"
        super().__init__(msg)


class RepositoryNotFoundError(MinvcsError):
    """Raised when no managed root exists above a directory."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(f"Directory is not managed by minvcs: {path}")


class RepositoryExistsError(MinvcsError):
    """Raised when initializing inside an already managed directory."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(f"Directory is already managed by minvcs: {path}")


class ConfigError(MinvcsError):
    """Raised when a configuration value is invalid."""

    def __init__(self, name: str, value: str, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for {name}: {value!r} ({reason})")


class InvalidObjectError(MinvcsError):
    """Raised when an object is valid but not of the kind an operation needs."""

    def __init__(self, reason: str, digest: str = None):
        self.reason = reason
        self.digest = digest
        msg = f"Invalid object: {reason}"
        if digest:
            msg += f" (digest: {digest})"
        super().__init__(msg)


class InvalidFieldError(MinvcsError):
    """Raised when a caller-supplied text field cannot be recorded."""

    def __init__(self, name: str, value: str, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {name} {value!r}: {reason}")
