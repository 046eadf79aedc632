"""User-visible error text.

Each workflow shows the failure as plain text next to the triggering form:
backend failures by their code, input problems by their message, anything
else by a workflow-specific fallback such as ``load_failed``.
"""
from __future__ import annotations

from py_bankclient.domain.errors import ValidationError
from py_bankclient.infrastructure.http.errors import ApiError

__all__ = ["describe_error"]


def describe_error(exc: BaseException, fallback: str = "request_failed") -> str:
    if isinstance(exc, ApiError):
        return exc.code
    if isinstance(exc, ValidationError):
        return str(exc) or fallback
    return fallback
