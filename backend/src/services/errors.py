"""Typed errors raised by the store client, extractors and query layer."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Error categories surfaced to the UI layer."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    VALIDATION = "validation_error"
    UNKNOWN = "unknown"


class DashboardError(Exception):
    """Base error; carries a kind plus the upstream HTTP status when there is one."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, *, status: Optional[int] = None, path: Optional[str] = None):
        self.message = message
        self.status = status
        self.path = path
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        return self.kind in {ErrorKind.CONFLICT, ErrorKind.RATE_LIMITED}


class NotFoundError(DashboardError):
    """The remote store has no file at the path (often just "not created yet")."""

    kind = ErrorKind.NOT_FOUND


class LineNotFoundError(NotFoundError):
    """The targeted TODO or memo line is no longer present in the fresh file content."""


class ConflictError(DashboardError):
    """Write rejected because the revision token was stale. Re-read and retry."""

    kind = ErrorKind.CONFLICT


class UnauthorizedError(DashboardError):
    kind = ErrorKind.UNAUTHORIZED


class RateLimitedError(DashboardError):
    kind = ErrorKind.RATE_LIMITED


class ValidationError(DashboardError):
    """Caller supplied an empty or malformed value."""

    kind = ErrorKind.VALIDATION


class UnknownStoreError(DashboardError):
    """Any other non-2xx response or transport failure."""

    kind = ErrorKind.UNKNOWN


__all__ = [
    "ErrorKind",
    "DashboardError",
    "NotFoundError",
    "LineNotFoundError",
    "ConflictError",
    "UnauthorizedError",
    "RateLimitedError",
    "ValidationError",
    "UnknownStoreError",
]
