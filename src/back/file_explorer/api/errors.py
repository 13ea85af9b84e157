"""Error categories for explorer operations.

Every failure reaching a caller is an ``ExplorerError`` whose ``str()`` is a
human-readable message such as ``Failed to open file: ...``. The category is
carried alongside so the HTTP layer can choose a status code; it is never
retried automatically.
"""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """Failure categories surfaced to callers."""

    BACKEND_READ_FAILURE = "backend_read_failure"
    BACKEND_WRITE_FAILURE = "backend_write_failure"
    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    MALFORMED_REQUEST = "malformed_request"


class ExplorerError(Exception):
    """Base class for every error returned by the explorer."""

    category: ErrorCategory = ErrorCategory.BACKEND_READ_FAILURE
    http_status: int = 502

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.category.value, "detail": self.message}


class BackendReadError(ExplorerError):
    """The store failed or timed out while reading."""

    category = ErrorCategory.BACKEND_READ_FAILURE
    http_status = 502


class BackendWriteError(ExplorerError):
    """The store failed or timed out while writing or removing."""

    category = ErrorCategory.BACKEND_WRITE_FAILURE
    http_status = 502


class NotFoundError(ExplorerError):
    """Missing file, directory, or share."""

    category = ErrorCategory.NOT_FOUND
    http_status = 404


class AccessDeniedError(ExplorerError):
    """The share exists but its policy forbids serving it."""

    category = ErrorCategory.ACCESS_DENIED
    http_status = 403


class MalformedRequestError(ExplorerError):
    """The request could not be parsed (e.g. bad share path)."""

    category = ErrorCategory.MALFORMED_REQUEST
    http_status = 400
