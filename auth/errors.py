"""
auth/errors.py -- Error taxonomy for the authentication flow.

Every failure an auth operation can produce is an AuthError subclass carrying
the HTTP status and the user-facing message. The API layer renders any
AuthError into the {"success": false, "message": ...} envelope with one
exception handler, so route handlers never build error responses by hand.

InfrastructureError keeps the underlying exception on .cause for logging.
The cause is never rendered into a response body.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for failures raised by the auth flow."""

    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AuthError):
    """Malformed or missing input."""

    status_code = 400


class NotFoundError(AuthError):
    """The referenced user does not exist."""

    status_code = 400


class AuthConflictError(AuthError):
    """Duplicate registration or a reset to the current password."""

    status_code = 400


class InfrastructureError(AuthError):
    """Directory or hasher failure."""

    status_code = 500

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidToken(AuthError):
    """Bearer token failed signature, structure, or expiry checks."""

    status_code = 401
