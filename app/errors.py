"""
Domain errors for the booking engine.

Raised in the service layer and rendered by the handlers registered in
``app.main``. Every error maps to one HTTP status and a stable code.
"""

from __future__ import annotations

from typing import Any


class BookingError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(BookingError):
    """A required field is missing or a value is out of range."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, details={"field": field})
        self.field = field


class Unauthorized(BookingError):
    """Credential missing, invalid or expired."""

    status_code = 401
    code = "UNAUTHORIZED"


class Forbidden(BookingError):
    """Authenticated, but not the owner of the resource."""

    status_code = 403
    code = "FORBIDDEN"


class NotFound(BookingError):
    """Referenced court or booking does not exist."""

    status_code = 404
    code = "NOT_FOUND"


class Conflict(BookingError):
    """The requested state collides with existing data."""

    status_code = 409
    code = "CONFLICT"


def error_payload(*, code: str, message: str, details: object | None = None) -> dict:
    payload: dict = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload
