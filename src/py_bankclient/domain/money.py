"""Fixed-point money codec.

All amounts travel and are stored as integer minor units ("cents"). This module
is the only place where user text and integers meet.

Public API:
- decimal_to_minor_units(text) -> int: strict parse, at most two decimals, no rounding.
- minor_units_to_decimal(amount) -> str: canonical "[-]W.FF" rendering.
- minor_units_to_decimal_value(amount) -> Decimal: exact Decimal for previews.
- format_money(amount, currency) -> str: rendering with the currency symbol.

The global Decimal context is not modified.
"""
from __future__ import annotations

import re
from decimal import Decimal

from .errors import ValidationError

__all__ = [
    "MINOR_UNITS_PER_UNIT",
    "CURRENCY_SYMBOLS",
    "decimal_to_minor_units",
    "minor_units_to_decimal",
    "minor_units_to_decimal_value",
    "format_money",
]

MINOR_UNITS_PER_UNIT = 100

CURRENCY_SYMBOLS: dict[str, str] = {"USD": "$", "EUR": "€"}

# sign? digits ('.' 0..2 digits)?, ASCII digits only
_AMOUNT_RE = re.compile(r"([+-])?([0-9]+)(?:\.([0-9]{0,2}))?", re.ASCII)


def decimal_to_minor_units(text: str) -> int:
    """Parse a human decimal amount into integer minor units.

    Accepted forms: "10", "10.5", "10.50", "-3.2", "+1", "10.". Surrounding
    whitespace is ignored. A fractional part shorter than two digits is
    right-padded with zeros ("10.5" -> 1050).

    Raises:
        ValidationError: empty input ("amount required"); more than two
            fractional digits or anything else outside the grammar, such as
            exponents, thousands separators or letters ("invalid amount format").
    """
    if not isinstance(text, str):
        raise ValidationError("invalid amount format")
    raw = text.strip()
    if not raw:
        raise ValidationError("amount required")

    m = _AMOUNT_RE.fullmatch(raw)
    if m is None:
        raise ValidationError("invalid amount format")
    sign_raw, whole_raw, frac_raw = m.groups()
    frac_raw = frac_raw or ""

    sign = -1 if sign_raw == "-" else 1
    whole = int(whole_raw)
    frac = int(frac_raw.ljust(2, "0"))
    return sign * (whole * MINOR_UNITS_PER_UNIT + frac)


def _require_int(amount: int) -> int:
    # bool is an int subclass but never a valid amount
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(f"Amount must be an integer number of minor units: {amount!r}")
    return amount


def minor_units_to_decimal(amount: int) -> str:
    """Render integer minor units as ``sign? whole '.' two-digit fraction``.

    Uses the absolute value for the decomposition and a single leading '-' for
    negative values: 0 -> "0.00", -5 -> "-0.05", 123456 -> "1234.56".
    """
    value = _require_int(amount)
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), MINOR_UNITS_PER_UNIT)
    return f"{sign}{whole}.{frac:02d}"


def minor_units_to_decimal_value(amount: int) -> Decimal:
    """Return the exact Decimal for minor units (scaled by 10^-2)."""
    value = _require_int(amount)
    return Decimal(value).scaleb(-2)


def format_money(amount: int, currency: str | None = None) -> str:
    """Render amount with a currency symbol when known ("$10.00", "€-1.50").

    Unknown currencies fall back to a code prefix ("GBP 10.00").
    """
    text = minor_units_to_decimal(amount)
    if not currency:
        return text
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{code} {text}"
    return f"{symbol}{text}"
