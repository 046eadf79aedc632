"""Application layer: session state, DTOs, cancellation and async use cases."""

from .cancellation import CancellationToken, OperationCancelled
from .dto import DashboardSnapshot, RegisterInput, TransactionPage, TransactionQuery
from .session import SessionState, SessionStatus, SessionStore

__all__ = [
    "CancellationToken",
    "OperationCancelled",
    "DashboardSnapshot",
    "RegisterInput",
    "TransactionPage",
    "TransactionQuery",
    "SessionState",
    "SessionStatus",
    "SessionStore",
]
