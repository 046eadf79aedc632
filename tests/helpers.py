"""Shared fakes and payload builders for the unit tests."""
from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

BASE_URL = "http://bank.test"

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


def user_payload(**overrides: Any) -> dict[str, Any]:
    data = {
        "id": "u-1",
        "email": "alice@example.com",
        "first_name": "Alice",
        "last_name": "Smith",
        "created_at": "2024-01-02T03:04:05Z",
        "updated_at": "2024-01-02T03:04:05Z",
    }
    data.update(overrides)
    return data


def auth_payload(access: str = "access-1", refresh: str = "refresh-1") -> dict[str, Any]:
    return {"access_token": access, "refresh_token": refresh, "user": user_payload()}


def account_payload(currency: str = "USD", balance_cents: int = 100_000) -> dict[str, Any]:
    return {
        "id": f"acc-{currency.lower()}",
        "user_id": "u-1",
        "currency": currency,
        "balance_cents": balance_cents,
        "created_at": "2024-01-02T03:04:05Z",
        "updated_at": "2024-01-02T03:04:05Z",
    }


def transaction_payload(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": "tx-1",
        "type": "transfer",
        "from_account_id": "acc-usd",
        "to_account_id": "acc-usd-2",
        "amount_cents": 1050,
        "currency": "USD",
        "exchange_rate": None,
        "converted_amount_cents": None,
        "description": "Transfer to bob@example.com",
        "created_at": "2024-01-03T10:00:00Z",
    }
    data.update(overrides)
    return data


class FakeBackend:
    """Programmable stand-in for the banking API behind ``httpx.MockTransport``.

    Routes are keyed by (method, path). Unknown routes answer 404 {"error": "not_found"}.
    Every request is recorded in ``requests`` for assertions.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        status: int = 200,
        content: bytes | None = None,
        handler: Handler | None = None,
    ) -> None:
        if handler is None:

            def handler(_request: httpx.Request) -> httpx.Response:
                if content is not None:
                    return httpx.Response(status, content=content)
                if json_body is None:
                    return httpx.Response(status)
                return httpx.Response(status, json=json_body)

        self.routes[(method.upper(), path)] = handler

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response | Awaitable[httpx.Response]:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not_found"})
        return handler(request)


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content.decode("utf-8"))
