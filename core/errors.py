"""
core/errors.py -- Domain error taxonomy shared by every layer.

Services raise these; api/main.py maps them onto HTTP responses with a single
exception handler. Each class carries its own status code and machine-readable
code so route handlers never translate errors by hand.

Auth failures use deliberately generic messages. Validation and conflict
errors carry specific, human-readable messages the client can show as-is.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for expected, client-visible failures."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(AppError):
    """Malformed or missing input. The client must fix the request."""

    status_code = 400
    code = "validation_error"


class ConflictError(AppError):
    """Duplicate identity (email already registered)."""

    # Reported as 400 like every other signup rejection.
    status_code = 400
    code = "email_taken"


class AuthError(AppError):
    """Bad credentials, or a missing/invalid/expired token."""

    status_code = 401
    code = "unauthorized"


class ForbiddenError(AppError):
    """The resource exists but the caller does not own it."""

    status_code = 403
    code = "forbidden"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
