"""Banking client CLI.

Thin controllers over the SessionStore and async use cases. Human output uses
rich tables by default; ``--json`` prints deterministic JSON instead.

Exit codes: 0 success, 2 rejected input or backend rejection, 1 transport or
unexpected failure.
"""
from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.markup import escape

from py_bankclient import __version__
from py_bankclient.application.dto import DEFAULT_PAGE_LIMIT, RegisterInput, TransactionQuery
from py_bankclient.application.use_cases_async import (
    AsyncExchange,
    AsyncListAccounts,
    AsyncListTransactions,
    AsyncLoadDashboard,
    AsyncTransfer,
)
from py_bankclient.application.use_cases_async.transactions import amount_to_minor_units
from py_bankclient.domain.errors import ValidationError
from py_bankclient.domain.exchange import quote_exchange
from py_bankclient.domain.money import format_money
from py_bankclient.infrastructure.logging.config import get_logger
from py_bankclient.sdk.bootstrap import AppContext
from py_bankclient.sdk.errors import (
    BackendRejected,
    DomainViolation,
    ServiceUnavailable,
    UserInputError,
    map_exception,
)
from py_bankclient.sdk.json import to_json

from . import infra
from .formatters import accounts_table, transaction_amount, transactions_table

app = typer.Typer(
    name="bankclient",
    help="Command-line client for the banking API.",
    add_completion=False,
    pretty_exceptions_enable=False,
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

_REJECTED = (UserInputError, BackendRejected, DomainViolation)


@contextmanager
def _report_errors() -> Iterator[None]:
    """Translate failures into a short message on stderr and an exit code."""
    try:
        yield
    except typer.Exit:
        raise
    except Exception as exc:
        public = map_exception(exc)
        get_logger("py_bankclient.cli").debug("cli.failed", error=type(exc).__name__)
        if isinstance(public, BackendRejected):
            err_console.print(f"[red]error:[/red] {escape(public.code)}")
            for field, message in public.fields:
                err_console.print(f"  {escape(field)}: {escape(message)}")
        elif isinstance(public, ServiceUnavailable):
            err_console.print(f"[red]service unavailable:[/red] {escape(str(public))}")
        elif isinstance(public, _REJECTED):
            err_console.print(f"[red]error:[/red] {escape(str(public))}")
        else:
            err_console.print(f"[red]unexpected:[/red] {escape(str(public))}")
        raise typer.Exit(2 if isinstance(public, _REJECTED) else 1) from exc


def _signed_in_token(ctx: AppContext) -> str:
    """Token of a restored session; a stale or missing token is rejected."""
    if not ctx.session.is_authenticated:
        raise ValidationError("not authenticated")
    return ctx.session.require_token()


def _emit_json(data: object) -> None:
    typer.echo(to_json(data))


# === Session ===
@app.command()
def version() -> None:
    """Print package version."""
    typer.echo(__version__)


@app.command()
def login(
    email: str = typer.Argument(..., help="Account email."),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Account password."),
) -> None:
    """Sign in and persist the access token."""

    async def _logic(ctx: AppContext):
        return await ctx.session.login(email, password)

    with _report_errors():
        user = infra.run_with_context(_logic, restore=False)
    console.print(f"[green]Signed in as {escape(user.display_name)}[/green]")


@app.command()
def register(
    email: str = typer.Argument(..., help="Account email."),
    first_name: str = typer.Option(..., "--first-name", prompt=True),
    last_name: str = typer.Option(..., "--last-name", prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Create a user and sign in. The backend opens the USD and EUR accounts."""
    data = RegisterInput(email=email, password=password, first_name=first_name, last_name=last_name)

    async def _logic(ctx: AppContext):
        return await ctx.session.register(data)

    with _report_errors():
        user = infra.run_with_context(_logic, restore=False)
    console.print(f"[green]Registered and signed in as {escape(user.display_name)}[/green]")


@app.command()
def logout() -> None:
    """Sign out; local credentials are dropped even if the backend is unreachable."""

    async def _logic(ctx: AppContext) -> None:
        await ctx.session.logout()

    with _report_errors():
        infra.run_with_context(_logic, restore=False)
    console.print("Signed out")


@app.command()
def me(json_output: bool = typer.Option(False, "--json", help="Output JSON.")) -> None:
    """Show the signed-in user."""

    async def _logic(ctx: AppContext):
        _signed_in_token(ctx)
        return ctx.session.user

    with _report_errors():
        user = infra.run_with_context(_logic)
    if json_output:
        _emit_json(user)
        return
    console.print(f"{escape(user.display_name)} <{escape(user.email)}>")


# === Accounts & history ===
@app.command()
def dashboard(json_output: bool = typer.Option(False, "--json", help="Output JSON.")) -> None:
    """Balances and the five latest transactions, fetched concurrently."""

    async def _logic(ctx: AppContext):
        return await AsyncLoadDashboard(ctx.client)(_signed_in_token(ctx))

    with _report_errors():
        snap = infra.run_with_context(_logic)
    if json_output:
        _emit_json(snap)
        return
    if snap.accounts is not None:
        console.print(accounts_table(snap.accounts))
    if snap.recent_transactions is not None:
        if snap.recent_transactions:
            console.print(transactions_table(snap.recent_transactions, title="Recent transactions"))
        else:
            console.print("No transactions yet.")
    for slot, message in sorted(snap.errors.items()):
        err_console.print(f"[yellow]{escape(slot)}:[/yellow] {escape(message)}")


@app.command()
def accounts(json_output: bool = typer.Option(False, "--json", help="Output JSON.")) -> None:
    """List balances per currency."""

    async def _logic(ctx: AppContext):
        return await AsyncListAccounts(ctx.client)(_signed_in_token(ctx))

    with _report_errors():
        items = infra.run_with_context(_logic)
    if json_output:
        _emit_json(items)
        return
    console.print(accounts_table(items))


@app.command()
def transactions(
    tx_type: str | None = typer.Option(None, "--type", help="transfer or exchange; all when omitted."),
    page: int = typer.Option(1, "--page", min=1),
    limit: int = typer.Option(DEFAULT_PAGE_LIMIT, "--limit", min=1),
    json_output: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    """Show one page of transaction history."""

    async def _logic(ctx: AppContext):
        query = TransactionQuery(type=tx_type or None, page=page, limit=limit)
        return await AsyncListTransactions(ctx.client)(_signed_in_token(ctx), query)

    with _report_errors():
        result = infra.run_with_context(_logic)
    if json_output:
        _emit_json({"items": result.items, "page": page, "limit": limit, "has_next": result.has_next})
        return
    if not result.items:
        console.print("No transactions.")
    else:
        console.print(transactions_table(result.items))
    hints = [f"page {page}"]
    if result.has_previous:
        hints.append(f"prev: --page {page - 1}")
    if result.has_next:
        hints.append(f"next: --page {page + 1}")
    console.print(" | ".join(hints))


# === Money movement ===
@app.command()
def transfer(
    to_user_email: str = typer.Argument(..., help="Recipient email."),
    amount: str = typer.Argument(..., help="Amount, e.g. 10.50"),
    currency: str = typer.Option("USD", "--currency", "-c", help="USD or EUR."),
    json_output: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    """Send money to another user."""

    async def _logic(ctx: AppContext):
        return await AsyncTransfer(ctx.client)(_signed_in_token(ctx), to_user_email, currency, amount)

    with _report_errors():
        tx = infra.run_with_context(_logic)
    if json_output:
        _emit_json(tx)
        return
    console.print(f"[green]Transfer completed:[/green] {escape(transaction_amount(tx))}")


@app.command()
def exchange(
    amount: str = typer.Argument(..., help="Amount to convert, e.g. 100"),
    from_currency: str = typer.Option("USD", "--from", help="Currency to pay with."),
    preview: bool = typer.Option(False, "--preview", help="Only show the estimate."),
    json_output: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    """Convert between your own USD and EUR accounts."""

    async def _logic(ctx: AppContext):
        amount_cents = amount_to_minor_units(amount)
        quote = quote_exchange(amount_cents, from_currency, ctx.exchange_rate)
        if preview:
            return quote, None
        tx = await AsyncExchange(ctx.client)(_signed_in_token(ctx), quote.from_currency, amount_cents)
        return quote, tx

    with _report_errors():
        quote, tx = infra.run_with_context(_logic, restore=not preview)
    if json_output:
        _emit_json({"quote": quote, "transaction": tx})
        return
    console.print(
        f"Estimated: {format_money(quote.amount_cents, quote.from_currency)} -> "
        f"{format_money(quote.converted_cents, quote.to_currency)}"
    )
    if tx is not None:
        console.print(f"[green]Exchange completed:[/green] {escape(transaction_amount(tx))}")


def cli(argv: list[str] | None = None) -> int:
    """Run the Typer application and return a process-style exit code.

    Accepts optional argv for programmatic use.
    """
    try:
        app(args=argv, prog_name="bankclient")
    except SystemExit as se:
        return int(se.code) if isinstance(se.code, int) else 0
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(cli())
