from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from rich.table import Table

from py_bankclient.domain.money import format_money, minor_units_to_decimal
from py_bankclient.domain.models import Account, Transaction

__all__ = [
    "accounts_table",
    "transactions_table",
    "transaction_amount",
    "human_time",
]


def human_time(dt: datetime) -> str:
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")


def transaction_amount(tx: Transaction) -> str:
    """``USD 10.00`` plus `` -> 9.20`` for exchanges."""
    text = f"{tx.currency} {minor_units_to_decimal(tx.amount_cents)}"
    if tx.converted_amount_cents is not None:
        text += f" -> {minor_units_to_decimal(tx.converted_amount_cents)}"
    return text


def accounts_table(accounts: Iterable[Account]) -> Table:
    table = Table(title="Balances")
    table.add_column("Currency", style="cyan")
    table.add_column("Balance", justify="right")
    for account in accounts:
        table.add_row(account.currency, format_money(account.balance_cents, account.currency))
    return table


def transactions_table(items: Iterable[Transaction], title: str = "Transactions") -> Table:
    table = Table(title=title)
    table.add_column("Time")
    table.add_column("Type", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Description")
    for tx in items:
        table.add_row(human_time(tx.created_at), tx.type, transaction_amount(tx), tx.description)
    return table
