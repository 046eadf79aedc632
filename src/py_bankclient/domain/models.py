"""Wire models for backend payloads.

Every payload is validated here right after JSON parsing, so downstream code
works with typed, frozen objects instead of raw dicts. Unknown keys are ignored;
missing keys or wrong types fail validation.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "Currency",
    "TransactionType",
    "SUPPORTED_CURRENCIES",
    "TRANSACTION_TYPES",
    "User",
    "AuthResponse",
    "Account",
    "Transaction",
    "FieldError",
    "ErrorPayload",
]

Currency = Literal["USD", "EUR"]
TransactionType = Literal["transfer", "exchange"]

SUPPORTED_CURRENCIES: tuple[str, ...] = get_args(Currency)
TRANSACTION_TYPES: tuple[str, ...] = get_args(TransactionType)


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class User(_WireModel):
    """Authenticated user record as returned by /auth/me, /auth/login and /auth/register."""

    id: str
    email: str
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime

    @property
    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.email


class AuthResponse(_WireModel):
    """Token pair plus user, returned by login and registration."""

    access_token: str = Field(min_length=1)
    refresh_token: str = ""
    user: User


class Account(_WireModel):
    """Wallet in a single currency with an integer balance in minor units."""

    id: str
    currency: Currency
    balance_cents: int = Field(strict=True)


class Transaction(_WireModel):
    """Immutable ledger record: a transfer between users or a currency exchange.

    ``exchange_rate`` and ``converted_amount_cents`` are present for exchanges only.
    """

    id: str
    type: TransactionType
    from_account_id: str | None = None
    to_account_id: str
    amount_cents: int = Field(strict=True)
    currency: Currency
    exchange_rate: Decimal | None = None
    converted_amount_cents: int | None = Field(default=None, strict=True)
    description: str = ""
    created_at: datetime
    from_user_email: str | None = None
    to_user_email: str | None = None


class FieldError(_WireModel):
    field: str
    message: str


class ErrorPayload(_WireModel):
    """Backend failure shape: ``{error}`` or ``{error, fields: [{field, message}]}``."""

    error: str
    fields: list[FieldError] | None = None
