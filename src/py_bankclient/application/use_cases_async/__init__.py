"""Async use cases over the banking API.

Each use case is a small dataclass holding an ApiClient and exposing
``async __call__``; tokens are passed explicitly by the caller.
"""

from .accounts import AsyncListAccounts
from .auth import AsyncGetCurrentUser, AsyncLogin, AsyncLogout, AsyncRegister
from .dashboard import AsyncLoadDashboard
from .transactions import AsyncExchange, AsyncListTransactions, AsyncTransfer

__all__ = [
    "AsyncGetCurrentUser",
    "AsyncLogin",
    "AsyncLogout",
    "AsyncRegister",
    "AsyncListAccounts",
    "AsyncListTransactions",
    "AsyncTransfer",
    "AsyncExchange",
    "AsyncLoadDashboard",
]
