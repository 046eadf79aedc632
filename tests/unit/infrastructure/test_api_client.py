from __future__ import annotations

import httpx
import pytest

from helpers import BASE_URL, FakeBackend, account_payload, request_json
from py_bankclient.domain.models import Account
from py_bankclient.infrastructure.http.client import ApiClient, build_query
from py_bankclient.infrastructure.http.errors import ApiError, InvalidResponseError, TransportError


@pytest.mark.asyncio
async def test_non_json_error_body_synthesizes_http_code(backend: FakeBackend, client: ApiClient) -> None:
    backend.on("GET", "/accounts", status=500, content=b"<html>boom</html>")
    with pytest.raises(ApiError) as ei:
        await client.request("/accounts")
    assert ei.value.code == "http_500"
    assert ei.value.status == 500
    assert ei.value.body is None


@pytest.mark.asyncio
async def test_error_code_taken_from_payload(backend: FakeBackend, client: ApiClient) -> None:
    backend.on("POST", "/transactions/transfer", status=400, json_body={"error": "insufficient_funds"})
    with pytest.raises(ApiError) as ei:
        await client.request("/transactions/transfer", body={"amount_cents": 1})
    assert ei.value.code == "insufficient_funds"
    assert ei.value.status == 400
    assert ei.value.body == {"error": "insufficient_funds"}
    assert ei.value.fields == ()


@pytest.mark.asyncio
async def test_error_fields_preserved(backend: FakeBackend, client: ApiClient) -> None:
    body = {"error": "validation_error", "fields": [{"field": "email", "message": "invalid email"}]}
    backend.on("POST", "/auth/register", status=422, json_body=body)
    with pytest.raises(ApiError) as ei:
        await client.request("/auth/register", body={})
    assert ei.value.code == "validation_error"
    assert ei.value.field_messages() == {"email": "invalid email"}


@pytest.mark.asyncio
async def test_malformed_fields_keep_error_code(backend: FakeBackend, client: ApiClient) -> None:
    body = {"error": "validation_error", "fields": [{"field": "amount"}]}
    backend.on("POST", "/transactions/transfer", status=400, json_body=body)
    with pytest.raises(ApiError) as ei:
        await client.request("/transactions/transfer", body={})
    assert ei.value.code == "validation_error"
    assert ei.value.status == 400
    assert ei.value.fields == ()
    assert ei.value.body == body


@pytest.mark.asyncio
async def test_empty_error_field_falls_back_to_status(backend: FakeBackend, client: ApiClient) -> None:
    backend.on("GET", "/auth/me", status=401, json_body={"error": ""})
    with pytest.raises(ApiError) as ei:
        await client.request("/auth/me", token="t")
    assert ei.value.code == "http_401"
    assert ei.value.body == {"error": ""}


@pytest.mark.asyncio
async def test_json_error_without_error_key(backend: FakeBackend, client: ApiClient) -> None:
    backend.on("GET", "/accounts", status=503, json_body={"message": "down"})
    with pytest.raises(ApiError) as ei:
        await client.request("/accounts")
    assert ei.value.code == "http_503"
    assert ei.value.body == {"message": "down"}


@pytest.mark.asyncio
async def test_empty_success_body_returns_none(backend: FakeBackend, client: ApiClient) -> None:
    backend.on("POST", "/auth/logout", status=204)
    assert await client.request("/auth/logout", body={"access_token": "a", "refresh_token": ""}) is None


@pytest.mark.asyncio
async def test_non_json_success_body_is_invalid_response(backend: FakeBackend, client: ApiClient) -> None:
    backend.on("GET", "/accounts", content=b"not json")
    with pytest.raises(InvalidResponseError) as ei:
        await client.request("/accounts")
    assert ei.value.code == "invalid_response"
    assert isinstance(ei.value, ApiError)


@pytest.mark.asyncio
async def test_response_model_validation(backend: FakeBackend, client: ApiClient) -> None:
    backend.on("GET", "/accounts", json_body=[account_payload("USD", 500)])
    accounts = await client.request("/accounts", response_model=list[Account])
    assert accounts[0].balance_cents == 500

    backend.on("GET", "/accounts", json_body=[{"id": "x"}])
    with pytest.raises(InvalidResponseError):
        await client.request("/accounts", response_model=list[Account])


@pytest.mark.asyncio
async def test_method_defaults_and_headers(backend: FakeBackend, client: ApiClient) -> None:
    backend.on("POST", "/auth/login", json_body={"ok": True})
    backend.on("GET", "/auth/me", json_body={"ok": True})

    await client.request("/auth/login", body={"email": "a@b.c", "password": "p"})
    await client.request("/auth/me", token="tok-1")

    post = backend.calls("POST", "/auth/login")[0]
    assert post.headers["content-type"] == "application/json"
    assert "authorization" not in post.headers
    assert request_json(post) == {"email": "a@b.c", "password": "p"}

    get = backend.calls("GET", "/auth/me")[0]
    assert get.headers["authorization"] == "Bearer tok-1"
    assert get.content == b""


@pytest.mark.asyncio
async def test_query_drops_empty_values(backend: FakeBackend, client: ApiClient) -> None:
    backend.on("GET", "/transactions", json_body=[])
    await client.request("/transactions", query={"type": None, "page": 2, "limit": 5, "q": "", "flag": True})
    req = backend.requests[-1]
    assert dict(req.url.params) == {"page": "2", "limit": "5", "flag": "true"}


def test_build_query() -> None:
    assert build_query(None) == {}
    assert build_query({"a": 0, "b": False, "c": None}) == {"a": "0", "b": "false"}


def test_url_join_against_origin() -> None:
    api = ApiClient(BASE_URL)
    assert str(api.url_for("/auth/me")) == f"{BASE_URL}/auth/me"
    assert str(api.url_for("/transactions", {"page": 1})) == f"{BASE_URL}/transactions?page=1"


@pytest.mark.asyncio
async def test_transport_failure_is_distinct_from_api_error() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with ApiClient(BASE_URL, transport=httpx.MockTransport(refuse)) as api:
        with pytest.raises(TransportError) as ei:
            await api.request("/accounts")
    assert not isinstance(ei.value, ApiError)
    assert ei.value.method == "GET"
