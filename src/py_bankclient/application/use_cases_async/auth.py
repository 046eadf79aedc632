from __future__ import annotations

from dataclasses import dataclass

from py_bankclient.application.dto import RegisterInput
from py_bankclient.domain.errors import ValidationError
from py_bankclient.domain.models import AuthResponse, User
from py_bankclient.infrastructure.http.client import ApiClient

__all__ = ["AsyncLogin", "AsyncRegister", "AsyncLogout", "AsyncGetCurrentUser"]


@dataclass(slots=True)
class AsyncLogin:
    """Authenticate with email/password.

    Contract:
      AsyncLogin(client)(email, password) -> AuthResponse

    Only emptiness is checked locally; credential validity is the backend's call.
    """

    client: ApiClient

    async def __call__(self, email: str, password: str) -> AuthResponse:
        norm_email = (email or "").strip()
        if not norm_email:
            raise ValidationError("email required")
        if not password:
            raise ValidationError("password required")
        return await self.client.request(
            "/auth/login",
            method="POST",
            body={"email": norm_email, "password": password},
            response_model=AuthResponse,
        )


@dataclass(slots=True)
class AsyncRegister:
    """Create a user; the backend also opens its USD and EUR accounts.

    Contract:
      AsyncRegister(client)(RegisterInput) -> AuthResponse
    """

    client: ApiClient

    async def __call__(self, data: RegisterInput) -> AuthResponse:
        payload = data.to_payload()
        if not payload["email"]:
            raise ValidationError("email required")
        if not payload["password"]:
            raise ValidationError("password required")
        return await self.client.request(
            "/auth/register",
            method="POST",
            body=payload,
            response_model=AuthResponse,
        )


@dataclass(slots=True)
class AsyncLogout:
    """Ask the backend to invalidate the token pair."""

    client: ApiClient

    async def __call__(self, access_token: str, refresh_token: str = "") -> None:
        await self.client.request(
            "/auth/logout",
            method="POST",
            token=access_token,
            body={"access_token": access_token, "refresh_token": refresh_token},
        )


@dataclass(slots=True)
class AsyncGetCurrentUser:
    """Fetch the user behind a token ("who am I")."""

    client: ApiClient

    async def __call__(self, token: str) -> User:
        return await self.client.request("/auth/me", token=token, response_model=User)
