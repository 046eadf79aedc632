from __future__ import annotations

from dataclasses import dataclass

from py_bankclient.application.cancellation import CancellationToken, raise_if_cancelled
from py_bankclient.application.dto import TransactionPage, TransactionQuery
from py_bankclient.domain.errors import ValidationError
from py_bankclient.domain.exchange import counter_currency
from py_bankclient.domain.models import SUPPORTED_CURRENCIES, Transaction
from py_bankclient.domain.money import decimal_to_minor_units
from py_bankclient.infrastructure.http.client import ApiClient

__all__ = [
    "AsyncListTransactions",
    "AsyncTransfer",
    "AsyncExchange",
    "amount_to_minor_units",
    "normalize_currency",
]


def amount_to_minor_units(amount: str | int) -> int:
    """Accept user text (parsed strictly) or an already-converted int of minor units."""
    if isinstance(amount, str):
        return decimal_to_minor_units(amount)
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError("invalid amount format")
    return amount


def normalize_currency(currency: str) -> str:
    code = (currency or "").strip().upper()
    if code not in SUPPORTED_CURRENCIES:
        raise ValidationError(f"Unsupported currency: {currency!r}")
    return code


@dataclass(slots=True)
class AsyncListTransactions:
    """Fetch one page of transaction history.

    Contract:
      AsyncListTransactions(client)(token, query=TransactionQuery()) -> TransactionPage

    Query params: ``type`` (omitted when None), ``page``, ``limit``.
    """

    client: ApiClient

    async def __call__(
        self,
        token: str | None,
        query: TransactionQuery | None = None,
        cancel: CancellationToken | None = None,
    ) -> TransactionPage:
        q = query or TransactionQuery()
        items = await self.client.request(
            "/transactions",
            token=token,
            query=q.to_params(),
            response_model=list[Transaction] | None,
        )
        raise_if_cancelled(cancel)
        return TransactionPage(items=tuple(items or ()), query=q)


@dataclass(slots=True)
class AsyncTransfer:
    """Send money to another user in one currency.

    Steps:
      1. Parse amount (ValidationError before any network call).
      2. Normalize currency and trim recipient email.
      3. POST /transactions/transfer {to_user_email, currency, amount_cents}.

    Funds, limits and recipient existence are checked by the backend and come
    back as ApiError codes.
    """

    client: ApiClient

    async def __call__(
        self,
        token: str | None,
        to_user_email: str,
        currency: str,
        amount: str | int,
        cancel: CancellationToken | None = None,
    ) -> Transaction:
        amount_cents = amount_to_minor_units(amount)
        code = normalize_currency(currency)
        email = (to_user_email or "").strip()
        if not email:
            raise ValidationError("recipient email required")
        tx = await self.client.request(
            "/transactions/transfer",
            method="POST",
            token=token,
            body={"to_user_email": email, "currency": code, "amount_cents": amount_cents},
            response_model=Transaction,
        )
        raise_if_cancelled(cancel)
        return tx


@dataclass(slots=True)
class AsyncExchange:
    """Convert funds between the user's own USD and EUR accounts.

    ``to_currency`` defaults to the other supported currency. The booked rate
    and converted amount come back on the returned Transaction.
    """

    client: ApiClient

    async def __call__(
        self,
        token: str | None,
        from_currency: str,
        amount: str | int,
        to_currency: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> Transaction:
        amount_cents = amount_to_minor_units(amount)
        source = normalize_currency(from_currency)
        target = normalize_currency(to_currency) if to_currency else counter_currency(source)
        tx = await self.client.request(
            "/transactions/exchange",
            method="POST",
            token=token,
            body={"from_currency": source, "to_currency": target, "amount_cents": amount_cents},
            response_model=Transaction,
        )
        raise_if_cancelled(cancel)
        return tx
