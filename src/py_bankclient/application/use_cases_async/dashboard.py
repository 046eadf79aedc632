from __future__ import annotations

import asyncio
from dataclasses import dataclass

import structlog

from py_bankclient.application.cancellation import CancellationToken
from py_bankclient.application.dto import DashboardSnapshot, TransactionQuery
from py_bankclient.application.messages import describe_error
from py_bankclient.infrastructure.http.client import ApiClient
from py_bankclient.infrastructure.http.errors import ApiError, TransportError
from py_bankclient.infrastructure.logging.config import get_logger

from .accounts import AsyncListAccounts
from .transactions import AsyncListTransactions

__all__ = ["AsyncLoadDashboard", "RECENT_TRANSACTIONS_LIMIT"]

RECENT_TRANSACTIONS_LIMIT = 5


@dataclass(slots=True)
class AsyncLoadDashboard:
    """Load balances and the latest transactions concurrently.

    Both requests are in flight at once and may complete in any order. Each one
    writes only its own slot of the snapshot (``accounts`` or
    ``recent_transactions``) as soon as it completes; a failure is recorded
    under ``errors[slot]`` and does not touch the other slot.

    If ``cancel`` fires before a request completes, its result is dropped and
    the slot keeps its previous value.
    """

    client: ApiClient

    async def __call__(
        self,
        token: str | None,
        cancel: CancellationToken | None = None,
        recent_limit: int = RECENT_TRANSACTIONS_LIMIT,
        snapshot: DashboardSnapshot | None = None,
    ) -> DashboardSnapshot:
        snap = snapshot if snapshot is not None else DashboardSnapshot()
        if not token:
            return snap
        snap.errors.clear()
        log = get_logger("py_bankclient.dashboard")

        async with asyncio.TaskGroup() as tg:
            tg.create_task(self._load_accounts(token, snap, cancel, log))
            tg.create_task(self._load_recent(token, recent_limit, snap, cancel, log))
        return snap

    async def _load_accounts(
        self,
        token: str,
        snap: DashboardSnapshot,
        cancel: CancellationToken | None,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        try:
            accounts = await AsyncListAccounts(self.client)(token)
        except (ApiError, TransportError) as exc:
            if cancel is not None and cancel.cancelled:
                return
            message = describe_error(exc, "load_failed")
            log.info("dashboard.slot_failed", slot="accounts", error=message)
            snap.errors["accounts"] = message
            return
        if cancel is not None and cancel.cancelled:
            log.debug("dashboard.slot_discarded", slot="accounts")
            return
        snap.accounts = accounts

    async def _load_recent(
        self,
        token: str,
        limit: int,
        snap: DashboardSnapshot,
        cancel: CancellationToken | None,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        query = TransactionQuery(page=1, limit=limit)
        try:
            page = await AsyncListTransactions(self.client)(token, query)
        except (ApiError, TransportError) as exc:
            if cancel is not None and cancel.cancelled:
                return
            message = describe_error(exc, "load_failed")
            log.info("dashboard.slot_failed", slot="recent_transactions", error=message)
            snap.errors["recent_transactions"] = message
            return
        if cancel is not None and cancel.cancelled:
            log.debug("dashboard.slot_discarded", slot="recent_transactions")
            return
        snap.recent_transactions = list(page.items)
