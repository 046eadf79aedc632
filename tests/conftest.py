from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio

from helpers import BASE_URL, FakeBackend
from py_bankclient.infrastructure.http.client import ApiClient
from py_bankclient.infrastructure.storage.token_store import InMemoryTokenStorage


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def storage() -> InMemoryTokenStorage:
    return InMemoryTokenStorage()


@pytest_asyncio.fixture
async def client(backend: FakeBackend) -> AsyncIterator[ApiClient]:
    api = ApiClient(BASE_URL, transport=httpx.MockTransport(backend))
    try:
        yield api
    finally:
        await api.aclose()
