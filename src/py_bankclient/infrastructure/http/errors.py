"""Error types raised by the HTTP contract layer.

- TransportError: the request never produced a response (DNS, refused, reset).
- ApiError: the backend answered with a non-2xx status. ``code`` is never
  empty: it is the payload's ``error`` field or ``http_<status>``.
- InvalidResponseError: a 2xx answer whose payload could not be parsed or did
  not match the expected schema.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from py_bankclient.domain.models import FieldError

__all__ = [
    "ApiError",
    "InvalidResponseError",
    "TransportError",
    "status_code",
]


def status_code(status: int) -> str:
    """Synthesized error code for a bare HTTP status, e.g. ``http_500``."""
    return f"http_{status}"


class ApiError(Exception):
    """Backend failure with a machine-readable code and optional field messages.

    Attributes:
        code: Non-empty error code (from payload or ``http_<status>``).
        status: Raw HTTP status.
        body: Parsed JSON body, or None when the body was empty or not JSON.
        fields: Per-field validation messages, empty when absent.
    """

    def __init__(
        self,
        code: str,
        status: int,
        body: Any = None,
        fields: Iterable[FieldError] = (),
    ) -> None:
        self.code = code or status_code(status)
        self.status = status
        self.body = body
        self.fields: tuple[FieldError, ...] = tuple(fields)
        super().__init__(self.code)

    def field_messages(self) -> dict[str, str]:
        """Map field name -> message (last one wins on duplicates)."""
        return {f.field: f.message for f in self.fields}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, status={self.status})"


class InvalidResponseError(ApiError):
    """Success status but unusable payload (not JSON or schema mismatch)."""

    def __init__(self, status: int, body: Any = None, detail: str | None = None) -> None:
        super().__init__("invalid_response", status, body)
        self.detail = detail


class TransportError(Exception):
    """The request could not complete; no HTTP status is available."""

    def __init__(self, message: str, *, method: str | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
