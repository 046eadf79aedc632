"""Machine-readable output for ``bankclient --json``.

``to_json`` renders wire models, snapshots and plain containers as compact JSON
with sorted keys, so two runs over the same data print the same bytes. Money
stays in integer minor units; timestamps are rendered in UTC with a ``Z``
suffix and whole seconds.
"""
from __future__ import annotations

import json as _json
from dataclasses import fields, is_dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

__all__ = ["to_dict", "to_json"]

_SCALARS = (str, int, float, bool, type(None))


def _utc_stamp(dt: datetime) -> str:
    """``created_at``-style stamp: naive values are taken as UTC."""
    moment = dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)
    return moment.replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _fields_of(obj: Any) -> dict[str, Any]:
    if isinstance(obj, BaseModel):
        return {name: getattr(obj, name) for name in type(obj).model_fields}
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in fields(obj)}
    if hasattr(obj, "__dict__"):
        return {k: v for k, v in vars(obj).items() if not k.startswith("_")}
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def to_dict(obj: Any) -> Any:
    """Reduce ``obj`` to dicts, lists and scalars.

    Enum members collapse to their value before the scalar check, since a
    StrEnum is also a str. Decimals keep their exponent as text. Models,
    dataclasses and plain objects become dicts of their public fields; anything
    else raises TypeError.
    """
    if isinstance(obj, Enum):
        return to_dict(obj.value)
    if isinstance(obj, _SCALARS):
        return obj
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, datetime):
        return _utc_stamp(obj)
    if isinstance(obj, (list, tuple)):
        return [to_dict(item) for item in obj]
    source = obj if isinstance(obj, dict) else _fields_of(obj)
    return {str(key): to_dict(value) for key, value in source.items()}


def to_json(data: Any) -> str:
    return _json.dumps(to_dict(data), ensure_ascii=False, separators=(",", ":"), sort_keys=True)
