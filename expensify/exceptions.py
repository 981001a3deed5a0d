"""Domain exceptions.

Every failure a manager can report derives from ``ExpensifyError``. The
exception handlers in ``expensify.main`` render them as ``ErrorResponse``
bodies using ``code``, ``status_code`` and ``details``.
"""

from typing import Any


class ExpensifyError(Exception):
    """Base exception for all client-visible failures."""

    code = "InternalError"
    status_code = 500

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(ExpensifyError):
    """Malformed or missing input. ``details`` lists one entry per field."""

    code = "ValidationError"
    status_code = 400


class AuthError(ExpensifyError):
    """Missing or invalid bearer credential."""

    code = "AuthError"
    status_code = 401


class ForbiddenError(ExpensifyError):
    """Authenticated, but the record is not owned by the caller."""

    code = "Forbidden"
    status_code = 403


class NotFoundError(ExpensifyError):
    """Record absent (or hidden from a non-owner)."""

    code = "NotFound"
    status_code = 404


class StorageError(ExpensifyError):
    """Object storage rejected or failed a request."""

    code = "StorageError"
    status_code = 500


class InternalError(ExpensifyError):
    """Unexpected data store failure."""

    code = "InternalError"
    status_code = 500


class RateLimitError(ExpensifyError):
    """Too many requests from one client within the configured window."""

    code = "RateLimitExceeded"
    status_code = 429
