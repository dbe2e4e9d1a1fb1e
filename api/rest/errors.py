"""
Error taxonomy for the gateway.

Every error carries the HTTP status it maps to; `main.py` renders all of them
in the same `{success: false, error}` envelope.
"""

from __future__ import annotations

from fastapi import status

CONFLICT_MESSAGE = "A record with this unique value already exists."

# Engine texts that signal a uniqueness violation (SQLite, PostgreSQL).
_UNIQUE_VIOLATION_MARKERS = (
    "UNIQUE constraint failed",
    "duplicate key value violates unique constraint",
)


class RestError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RestError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(RestError):
    status_code = status.HTTP_404_NOT_FOUND


class MethodNotAllowedError(RestError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED


class ConflictError(RestError):
    status_code = status.HTTP_409_CONFLICT


class StorageError(RestError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def is_unique_violation(message: str) -> bool:
    return any(marker in (message or "") for marker in _UNIQUE_VIOLATION_MARKERS)
