"""Session state for the banking client.

SessionStore is the single owner of authentication state. It holds the access
token, the current user and a readiness flag, and moves between:

    UNINITIALIZED --refresh()--> RESTORING --ok--> AUTHENTICATED
                                           --fail--> UNAUTHENTICATED
    any --login()/register() ok--> AUTHENTICATED
    any --logout()--> UNAUTHENTICATED

The access token is persisted through a TokenStorage port so a session survives
restarts; the refresh token lives in memory only and is sent on logout.

A failed restore leaves the stale token in place: it is neither cleared from
memory nor from storage, so the next ``refresh()`` retries with it.
"""
from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

import structlog

from py_bankclient.application.dto import RegisterInput
from py_bankclient.application.ports import TokenStorage
from py_bankclient.application.use_cases_async.auth import (
    AsyncGetCurrentUser,
    AsyncLogin,
    AsyncLogout,
    AsyncRegister,
)
from py_bankclient.domain.errors import ValidationError
from py_bankclient.domain.models import AuthResponse, User
from py_bankclient.infrastructure.http.client import ApiClient
from py_bankclient.infrastructure.http.errors import ApiError, TransportError
from py_bankclient.infrastructure.logging.config import get_logger

__all__ = ["SessionStatus", "SessionState", "SessionStore", "SessionListener"]


class SessionStatus(StrEnum):
    UNINITIALIZED = "uninitialized"
    RESTORING = "restoring"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True, slots=True)
class SessionState:
    """Immutable view of the session handed to listeners and readers."""

    status: SessionStatus
    token: str | None
    user: User | None
    ready: bool

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED


SessionListener = Callable[[SessionState], None]


class SessionStore:
    def __init__(
        self,
        client: ApiClient,
        storage: TokenStorage,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._client = client
        self._storage = storage
        self._log = logger or get_logger("py_bankclient.session")
        self._token: str | None = storage.load()
        self._refresh_token: str = ""
        self._user: User | None = None
        self._status = SessionStatus.UNINITIALIZED
        self._ready = asyncio.Event()
        self._listeners: list[SessionListener] = []

    # readers

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    @property
    def is_authenticated(self) -> bool:
        return self._status is SessionStatus.AUTHENTICATED

    def snapshot(self) -> SessionState:
        return SessionState(status=self._status, token=self._token, user=self._user, ready=self.ready)

    def require_token(self) -> str:
        """Return the access token or raise ValidationError when signed out."""
        if not self._token:
            raise ValidationError("not authenticated")
        return self._token

    async def wait_until_ready(self) -> None:
        await self._ready.wait()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` for every state change; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # transitions

    async def refresh(self) -> SessionState:
        """Restore the session from the stored token.

        ApiError/TransportError end in UNAUTHENTICATED and are logged; anything
        else propagates. The store is ready afterwards in every case.
        """
        try:
            if not self._token:
                self._set(status=SessionStatus.UNAUTHENTICATED, user=None)
                return self.snapshot()
            self._set(status=SessionStatus.RESTORING, user=self._user)
            try:
                user = await AsyncGetCurrentUser(self._client)(self._token)
            except (ApiError, TransportError) as exc:
                self._log.info("session.restore_failed", error=type(exc).__name__, code=getattr(exc, "code", None))
                self._set(status=SessionStatus.UNAUTHENTICATED, user=None)
            else:
                self._log.debug("session.restored", user_id=user.id)
                self._set(status=SessionStatus.AUTHENTICATED, user=user)
        finally:
            self._mark_ready()
        return self.snapshot()

    async def login(self, email: str, password: str) -> User:
        auth = await AsyncLogin(self._client)(email, password)
        self._accept(auth)
        self._log.info("session.login", user_id=auth.user.id)
        return auth.user

    async def register(self, data: RegisterInput) -> User:
        auth = await AsyncRegister(self._client)(data)
        self._accept(auth)
        self._log.info("session.register", user_id=auth.user.id)
        return auth.user

    async def logout(self) -> None:
        """Best-effort server logout, then always drop local credentials."""
        if self._token:
            try:
                await AsyncLogout(self._client)(self._token, self._refresh_token)
            except (ApiError, TransportError) as exc:
                self._log.warning("session.logout_failed", error=type(exc).__name__)
        try:
            self._storage.clear()
        finally:
            # in-memory state is dropped even when the storage write fails
            self._token = None
            self._refresh_token = ""
            self._set(status=SessionStatus.UNAUTHENTICATED, user=None)
        self._log.info("session.logout")

    # internals

    def _accept(self, auth: AuthResponse) -> None:
        self._token = auth.access_token
        self._refresh_token = auth.refresh_token
        self._storage.save(auth.access_token)
        self._set(status=SessionStatus.AUTHENTICATED, user=auth.user)

    def _mark_ready(self) -> None:
        if self._ready.is_set():
            return
        self._ready.set()
        self._notify()

    def _set(self, *, status: SessionStatus, user: User | None) -> None:
        self._status = status
        self._user = user
        self._notify()

    def _notify(self) -> None:
        state = self.snapshot()
        for listener in list(self._listeners):
            listener(state)
