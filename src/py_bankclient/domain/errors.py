"""Domain error hierarchy.

- DomainError: base class for client-side rule violations.
- ValidationError: malformed user input, detected before any network call.
"""
from __future__ import annotations

__all__ = ["DomainError", "ValidationError"]


class DomainError(Exception):
    """Base class for domain-level errors."""


class ValidationError(DomainError):
    """Raised when user input is malformed (amounts, emails, page numbers)."""
