"""Persisted session token storage."""

from .token_store import FileTokenStorage, InMemoryTokenStorage

__all__ = ["FileTokenStorage", "InMemoryTokenStorage"]
