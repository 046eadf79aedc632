"""Domain layer: errors, money codec, wire models and exchange preview.

No I/O here; everything is importable without network or configuration.
"""

from .errors import DomainError, ValidationError
from .money import decimal_to_minor_units, minor_units_to_decimal

__all__ = [
    "DomainError",
    "ValidationError",
    "decimal_to_minor_units",
    "minor_units_to_decimal",
]
