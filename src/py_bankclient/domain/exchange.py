"""Exchange preview between the two supported currencies.

The backend owns the real rate and the booked amount; this quote only shows the
user an estimate before submitting. Rounding is half-up to whole minor units,
done in Decimal so no float drift leaks into displayed amounts.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .errors import ValidationError
from .models import SUPPORTED_CURRENCIES

__all__ = ["ExchangeQuote", "counter_currency", "quote_exchange"]

_ONE = Decimal(1)


@dataclass(frozen=True, slots=True)
class ExchangeQuote:
    """Preview of an exchange: what is paid, what is received and at which rate."""

    from_currency: str
    to_currency: str
    amount_cents: int
    converted_cents: int
    rate: Decimal


def counter_currency(currency: str) -> str:
    """Return the other supported currency (USD <-> EUR)."""
    code = (currency or "").strip().upper()
    if code not in SUPPORTED_CURRENCIES:
        raise ValidationError(f"Unsupported currency: {currency!r}")
    return next(c for c in SUPPORTED_CURRENCIES if c != code)


def _as_rate(value: Decimal | str | float | int) -> Decimal:
    try:
        rate = Decimal(str(value))
    except (InvalidOperation, ValueError) as err:
        raise ValidationError(f"Invalid exchange rate: {value!r}") from err
    if not rate.is_finite() or rate <= 0:
        raise ValidationError("Exchange rate must be positive")
    return rate


def quote_exchange(
    amount_cents: int,
    from_currency: str,
    usd_to_eur_rate: Decimal | str | float | int,
) -> ExchangeQuote:
    """Estimate the converted amount for an exchange.

    USD -> EUR multiplies by ``usd_to_eur_rate``; EUR -> USD divides by it.
    The effective rate in the quote is the one applied in the chosen direction.

    Raises:
        ValidationError: unsupported currency or non-positive rate.
    """
    source = (from_currency or "").strip().upper()
    target = counter_currency(source)
    usd_eur = _as_rate(usd_to_eur_rate)
    if source == "USD":
        rate = usd_eur
        raw = Decimal(amount_cents) * usd_eur
    else:
        rate = _ONE / usd_eur
        raw = Decimal(amount_cents) / usd_eur
    converted = raw.to_integral_value(rounding=ROUND_HALF_UP)
    return ExchangeQuote(
        from_currency=source,
        to_currency=target,
        amount_cents=amount_cents,
        converted_cents=int(converted),
        rate=rate,
    )
