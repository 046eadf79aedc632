"""SDK public error classes and exception mapping.

Public exceptions:
- UserInputError: input rejected locally before any request was sent
- BackendRejected: the backend answered with a non-2xx status (carries code/status/fields)
- ServiceUnavailable: no response was received from the backend
- DomainViolation: other domain rule violations
- UnexpectedError: any other error not classified above

map_exception(exc) keeps the original message and returns an instance of the
public exception type best matching the input.
"""
from __future__ import annotations

from py_bankclient.application.messages import describe_error
from py_bankclient.domain.errors import DomainError, ValidationError
from py_bankclient.infrastructure.http.errors import ApiError, TransportError

__all__ = [
    "UserInputError",
    "BackendRejected",
    "ServiceUnavailable",
    "DomainViolation",
    "UnexpectedError",
    "map_exception",
    "describe_error",
]


class UserInputError(Exception):
    """Raised when user input is invalid or cannot be parsed.

    Keep messages concise; callers may present them directly to users.
    """


class BackendRejected(Exception):
    """The backend refused the request; ``code`` is its machine-readable reason."""

    def __init__(self, code: str, status: int, fields: tuple[tuple[str, str], ...] = ()) -> None:
        super().__init__(code)
        self.code = code
        self.status = status
        self.fields = fields


class ServiceUnavailable(Exception):
    """No response from the backend (connection refused, DNS, reset)."""


class DomainViolation(Exception):
    """Raised when domain rules are violated."""


class UnexpectedError(Exception):
    """Raised when an unexpected error occurs inside the SDK/use cases."""


def map_exception(exc: Exception) -> Exception:
    """Map internal exceptions to public SDK exceptions.

    Rules:
    - ValidationError -> UserInputError
    - ApiError -> BackendRejected
    - TransportError -> ServiceUnavailable
    - DomainError -> DomainViolation
    - any other -> UnexpectedError
    """
    msg = str(exc)
    if isinstance(exc, ValidationError):
        return UserInputError(msg)
    if isinstance(exc, ApiError):
        fields = tuple((f.field, f.message) for f in exc.fields)
        return BackendRejected(exc.code, exc.status, fields)
    if isinstance(exc, TransportError):
        return ServiceUnavailable(msg)
    if isinstance(exc, DomainError):
        return DomainViolation(msg)
    return UnexpectedError(msg)
