"""Async-facing ports used by the application layer.

TokenStorage is the single persisted slot for the access token. Writes are
whole-value replacements; no partial updates exist.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

__all__ = ["TokenStorage"]


@runtime_checkable
class TokenStorage(Protocol):
    """Persisted access-token slot that survives process restarts."""

    def load(self) -> str | None: ...
    def save(self, token: str) -> None: ...
    def clear(self) -> None: ...
