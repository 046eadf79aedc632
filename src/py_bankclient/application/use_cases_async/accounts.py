from __future__ import annotations

from dataclasses import dataclass

from py_bankclient.application.cancellation import CancellationToken, raise_if_cancelled
from py_bankclient.domain.models import Account
from py_bankclient.infrastructure.http.client import ApiClient

__all__ = ["AsyncListAccounts"]


@dataclass(slots=True)
class AsyncListAccounts:
    """List the current user's accounts.

    Returns a fresh list on every call; a ``null`` body is treated as no accounts.
    Raises OperationCancelled when ``cancel`` fired while the request was in flight.
    """

    client: ApiClient

    async def __call__(self, token: str | None, cancel: CancellationToken | None = None) -> list[Account]:
        accounts = await self.client.request("/accounts", token=token, response_model=list[Account] | None)
        raise_if_cancelled(cancel)
        return list(accounts or [])
