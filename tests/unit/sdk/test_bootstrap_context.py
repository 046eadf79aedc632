import httpx
import pytest

from helpers import user_payload
from py_bankclient.application.session import SessionStatus
from py_bankclient.infrastructure.config.settings import TestSettingsNoFile
from py_bankclient.infrastructure.storage.token_store import FileTokenStorage, InMemoryTokenStorage
from py_bankclient.sdk.bootstrap import AppContext, init_app


def test_init_app_uses_file_storage_from_settings(tmp_path):
    settings = TestSettingsNoFile(API_BASE_URL="http://bank.test", TOKEN_FILE=str(tmp_path / "s.json"))
    ctx = init_app(settings)
    assert isinstance(ctx, AppContext)
    assert isinstance(ctx.storage, FileTokenStorage)
    assert ctx.storage.path == tmp_path / "s.json"
    assert ctx.client.base_url.host == "bank.test"
    assert ctx.session.status is SessionStatus.UNINITIALIZED


@pytest.mark.asyncio
async def test_context_restores_session_over_transport():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/auth/me"
        return httpx.Response(200, json=user_payload())

    settings = TestSettingsNoFile(API_BASE_URL="http://bank.test")
    async with init_app(settings, transport=httpx.MockTransport(handler), storage=InMemoryTokenStorage("t")) as ctx:
        await ctx.session.refresh()
        assert ctx.session.is_authenticated
        assert ctx.exchange_rate == settings.exchange_rate_usd_to_eur
