"""SDK bootstrap: init application context with validated settings.

Provides a single entrypoint ``init_app`` that loads or accepts settings,
constructs the ApiClient, the token storage and the SessionStore, and returns an
AppContext that owns them.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from types import TracebackType

import httpx
import structlog

from py_bankclient.application.ports import TokenStorage
from py_bankclient.application.session import SessionStore
from py_bankclient.infrastructure.config.settings import BaseAppSettings, get_settings
from py_bankclient.infrastructure.http.client import ApiClient
from py_bankclient.infrastructure.logging.config import get_logger
from py_bankclient.infrastructure.storage.token_store import FileTokenStorage

__all__ = ["AppContext", "init_app"]


@dataclass(slots=True)
class AppContext:
    """Application bootstrap context for SDK users.

    Attributes:
        client: ApiClient bound to ``settings.api_base_url``.
        session: SessionStore sharing ``client`` and ``storage``.
        storage: Persisted access-token slot.
        settings: Validated settings used to configure the app.
        logger: structlog logger for the SDK consumer.
    """

    client: ApiClient
    session: SessionStore
    storage: TokenStorage
    settings: BaseAppSettings
    logger: structlog.stdlib.BoundLogger

    @property
    def exchange_rate(self) -> Decimal:
        return self.settings.exchange_rate_usd_to_eur

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> AppContext:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def init_app(
    settings: BaseAppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    storage: TokenStorage | None = None,
) -> AppContext:
    """Initialize the application context for SDK consumers.

    Steps:
    1) Load settings via get_settings() if not provided.
    2) Build the ApiClient (``transport`` overrides the network, e.g. MockTransport).
    3) Use ``storage`` or a FileTokenStorage at ``settings.token_file``.
    4) Create the SessionStore; the stored token is loaded, nothing is sent yet.

    Call ``await ctx.session.refresh()`` to restore the session.
    """
    settings = settings or get_settings()
    client = ApiClient(settings.api_base_url, transport=transport)
    if storage is None:
        storage = FileTokenStorage(settings.token_file, key=settings.token_storage_key)
    session = SessionStore(client, storage)
    return AppContext(
        client=client,
        session=session,
        storage=storage,
        settings=settings,
        logger=get_logger("py_bankclient"),
    )
