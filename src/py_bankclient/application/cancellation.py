"""Cooperative cancellation for in-flight requests.

Nothing is aborted on the wire: a consumer cancels the token when its view is
torn down, and the request's owner checks it before committing a result.
"""
from __future__ import annotations

__all__ = ["CancellationToken", "OperationCancelled", "raise_if_cancelled"]


class OperationCancelled(Exception):
    """The result arrived after its consumer cancelled; it was discarded."""


class CancellationToken:
    """One-way flag: once cancelled it stays cancelled."""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"


def raise_if_cancelled(cancel: CancellationToken | None) -> None:
    if cancel is not None and cancel.cancelled:
        raise OperationCancelled("operation cancelled")
