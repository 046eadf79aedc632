"""Token storage adapters.

- InMemoryTokenStorage: process-local slot (tests, ephemeral sessions).
- FileTokenStorage: JSON file holding ``{key: token}``; survives restarts.

File writes go to a sibling temp file first and are moved into place with
``os.replace`` so readers never observe a half-written slot.
"""
from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from py_bankclient.infrastructure.config.settings import DEFAULT_TOKEN_STORAGE_KEY
from py_bankclient.infrastructure.logging.config import get_logger

__all__ = ["FileTokenStorage", "InMemoryTokenStorage"]


@dataclass(slots=True)
class InMemoryTokenStorage:
    """Token slot kept in memory only."""

    token: str | None = None

    def load(self) -> str | None:
        return self.token or None

    def save(self, token: str) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None


class FileTokenStorage:
    """Token slot persisted under a fixed key in a small JSON document.

    Other keys in the document are preserved on save/clear. A missing, empty or
    corrupt file reads as "no token".
    """

    def __init__(self, path: str | os.PathLike[str], key: str = DEFAULT_TOKEN_STORAGE_KEY) -> None:
        self.path = Path(path).expanduser()
        self.key = key

    def _read(self) -> dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            get_logger("py_bankclient.storage").warning("token_store.corrupt", path=str(self.path))
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, sort_keys=True)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def load(self) -> str | None:
        value = self._read().get(self.key)
        return value if isinstance(value, str) and value else None

    def save(self, token: str) -> None:
        data = self._read()
        data[self.key] = token
        self._write(data)

    def clear(self) -> None:
        data = self._read()
        if self.key not in data:
            return
        del data[self.key]
        self._write(data)
