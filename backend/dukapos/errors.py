# Overview: Domain error taxonomy and its JSON rendering.

"""
Domain errors raised by services and rendered by routes.

Every failure a caller can observe maps to exactly one class here, and each
class carries the HTTP status it surfaces as. Routes catch DomainError,
render it with error_response(), and treat anything else as unexpected.

Body shape: {"error": "<ClassName>", "message": "...", "details": {...}?}
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for errors that map to a client-visible response."""

    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def error_code(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        body = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(DomainError, ValueError):
    """400-level input problem."""
    status_code = 400


class AuthenticationError(DomainError):
    status_code = 401


class InvalidCredentials(AuthenticationError):
    def __init__(self, message: str = "Invalid credentials", details=None):
        super().__init__(message, details)


class AccountInactive(AuthenticationError):
    def __init__(self, message: str = "Account is not active", details=None):
        super().__init__(message, details)


class AuthorizationError(DomainError):
    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class BusinessNotFound(NotFoundError):
    def __init__(self, message: str = "Business not found", details=None):
        super().__init__(message, details)


class ConflictError(DomainError, ValueError):
    """409-level business rule conflict (e.g., duplicate phone number)."""
    status_code = 409


class InsufficientStock(ConflictError):
    pass


class UnexpectedError(DomainError):
    status_code = 500


def error_response(exc: DomainError):
    """Flask (body, status) tuple for a domain error."""
    return exc.to_dict(), exc.status_code


def internal_error_response():
    return {"error": "UnexpectedError", "message": "Internal server error"}, 500
