from __future__ import annotations

import asyncio

import httpx
import pytest

from helpers import FakeBackend, account_payload, transaction_payload
from py_bankclient.application.cancellation import CancellationToken
from py_bankclient.application.dto import DashboardSnapshot
from py_bankclient.application.use_cases_async import AsyncLoadDashboard
from py_bankclient.infrastructure.http.client import ApiClient


@pytest.mark.asyncio
async def test_reverse_completion_fills_own_slots(backend: FakeBackend, client: ApiClient) -> None:
    release_accounts = asyncio.Event()
    finished: list[str] = []

    async def slow_accounts(request: httpx.Request) -> httpx.Response:
        await release_accounts.wait()
        finished.append("accounts")
        return httpx.Response(200, json=[account_payload("USD", 1234), account_payload("EUR", 99)])

    async def fast_transactions(request: httpx.Request) -> httpx.Response:
        finished.append("transactions")
        release_accounts.set()
        return httpx.Response(200, json=[transaction_payload(id="tx-a"), transaction_payload(id="tx-b")])

    backend.on("GET", "/accounts", handler=slow_accounts)
    backend.on("GET", "/transactions", handler=fast_transactions)

    snap = await asyncio.wait_for(AsyncLoadDashboard(client)("tok"), timeout=5)

    assert finished == ["transactions", "accounts"]
    assert snap.accounts is not None and [a.balance_cents for a in snap.accounts] == [1234, 99]
    assert snap.recent_transactions is not None
    assert [t.id for t in snap.recent_transactions] == ["tx-a", "tx-b"]
    assert snap.errors == {}
    assert snap.loaded
    assert snap.balance_for("eur").balance_cents == 99  # type: ignore[union-attr]


@pytest.mark.asyncio
async def test_recent_page_is_first_page_of_five(backend: FakeBackend, client: ApiClient) -> None:
    backend.on("GET", "/accounts", json_body=[])
    backend.on("GET", "/transactions", json_body=[])
    await AsyncLoadDashboard(client)("tok")
    params = dict(backend.calls("GET", "/transactions")[0].url.params)
    assert params == {"page": "1", "limit": "5"}


@pytest.mark.asyncio
async def test_failed_slot_does_not_touch_other(backend: FakeBackend, client: ApiClient) -> None:
    backend.on("GET", "/accounts", json_body=[account_payload()])
    backend.on("GET", "/transactions", status=500, content=b"oops")
    snap = await AsyncLoadDashboard(client)("tok")
    assert snap.accounts is not None and len(snap.accounts) == 1
    assert snap.recent_transactions is None
    assert snap.errors == {"recent_transactions": "http_500"}


@pytest.mark.asyncio
async def test_transport_failure_uses_fallback_message() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with ApiClient("http://bank.test", transport=httpx.MockTransport(refuse)) as api:
        snap = await AsyncLoadDashboard(api)("tok")
    assert snap.errors == {"accounts": "load_failed", "recent_transactions": "load_failed"}


@pytest.mark.asyncio
async def test_cancelled_load_keeps_previous_slots(backend: FakeBackend, client: ApiClient) -> None:
    cancel = CancellationToken()
    previous = DashboardSnapshot(accounts=[], recent_transactions=[])

    def cancel_then_answer(request: httpx.Request) -> httpx.Response:
        cancel.cancel()
        return httpx.Response(200, json=[account_payload()])

    backend.on("GET", "/accounts", handler=cancel_then_answer)
    backend.on("GET", "/transactions", handler=cancel_then_answer)

    snap = await AsyncLoadDashboard(client)("tok", cancel=cancel, snapshot=previous)
    assert snap is previous
    assert snap.accounts == []
    assert snap.recent_transactions == []
    assert snap.errors == {}


@pytest.mark.asyncio
async def test_without_token_nothing_is_fetched(backend: FakeBackend, client: ApiClient) -> None:
    snap = await AsyncLoadDashboard(client)(None)
    assert backend.requests == []
    assert snap.accounts is None and snap.recent_transactions is None
