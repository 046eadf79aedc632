"""HTTP contract layer for the banking backend.

ApiClient issues exactly one request per call (no retries, no caching, no
timeout) and normalizes the outcome:

- 2xx with empty body  -> None
- 2xx with JSON body   -> parsed data, optionally validated against ``response_model``
- non-2xx              -> ApiError(code, status, body, fields)
- no response at all   -> TransportError

Tokens and request bodies are never logged.
"""
from __future__ import annotations

import json
import time
from collections.abc import Mapping
from functools import lru_cache
from types import TracebackType
from typing import Any

import httpx
import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaValidationError
from pydantic_core import to_jsonable_python

from py_bankclient.domain.models import FieldError
from py_bankclient.infrastructure.logging.config import get_logger

from .errors import ApiError, InvalidResponseError, TransportError, status_code

__all__ = ["ApiClient", "build_query"]

QueryValue = str | int | bool | None


@lru_cache(maxsize=64)
def _adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


def _query_value(value: str | int | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(query: Mapping[str, QueryValue] | None) -> dict[str, str]:
    """Drop empty parameters (None or "") and stringify the rest."""
    if not query:
        return {}
    return {k: _query_value(v) for k, v in query.items() if v is not None and v != ""}


class ApiClient:
    """Async client for the banking API built on ``httpx.AsyncClient``.

    Args:
        base_url: Backend origin, e.g. ``http://localhost:8080``. Paths are
            resolved against it with URL-join semantics.
        transport: Optional httpx transport (``httpx.MockTransport`` in tests).
        logger: Optional structlog logger; defaults to ``py_bankclient.http``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self.base_url = httpx.URL(base_url)
        self._http = httpx.AsyncClient(transport=transport, timeout=None)
        self._log = logger or get_logger("py_bankclient.http")

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def url_for(self, path: str, query: Mapping[str, QueryValue] | None = None) -> httpx.URL:
        """Join ``path`` onto the base origin and append non-empty query params."""
        url = self.base_url.join(path)
        params = build_query(query)
        return url.copy_merge_params(params) if params else url

    async def request(
        self,
        path: str,
        *,
        method: str | None = None,
        token: str | None = None,
        body: Any = None,
        query: Mapping[str, QueryValue] | None = None,
        response_model: Any = None,
    ) -> Any:
        """Perform one request and return the parsed (optionally validated) payload.

        Args:
            path: Endpoint path, e.g. ``/auth/me``.
            method: HTTP method; defaults to POST when ``body`` is given, else GET.
            token: Bearer credential attached as ``Authorization`` when present.
            body: JSON-serializable payload (pydantic models and Decimals allowed).
            query: Query parameters; None/"" values are omitted.
            response_model: Type to validate the payload against (pydantic TypeAdapter).

        Raises:
            TransportError: no response was received.
            ApiError: non-2xx status.
            InvalidResponseError: 2xx with a payload that is not JSON or fails validation.
        """
        verb = (method or ("POST" if body is not None else "GET")).upper()
        url = self.url_for(path, query)
        headers = {"Accept": "application/json"}
        content: bytes | None = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            content = json.dumps(to_jsonable_python(body), separators=(",", ":")).encode("utf-8")
        if token:
            headers["Authorization"] = f"Bearer {token}"

        started = time.perf_counter()
        try:
            response = await self._http.request(verb, url, headers=headers, content=content)
        except httpx.TransportError as exc:
            self._log.warning("api.transport_error", method=verb, path=path, error=type(exc).__name__)
            raise TransportError(str(exc) or type(exc).__name__, method=verb, url=str(url)) from exc
        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)

        if not response.is_success:
            error = self._error_from(response)
            self._log.warning(
                "api.error",
                method=verb,
                path=path,
                status=response.status_code,
                code=error.code,
                elapsed_ms=elapsed_ms,
            )
            raise error

        self._log.debug("api.response", method=verb, path=path, status=response.status_code, elapsed_ms=elapsed_ms)
        data = self._parse_success(response)
        if response_model is None:
            return data
        try:
            return _adapter(response_model).validate_python(data)
        except SchemaValidationError as exc:
            self._log.warning("api.invalid_response", method=verb, path=path, status=response.status_code)
            raise InvalidResponseError(response.status_code, data, detail=str(exc)) from exc

    @staticmethod
    def _parse_success(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise InvalidResponseError(response.status_code, None, detail="response body is not JSON") from exc

    @staticmethod
    def _error_from(response: httpx.Response) -> ApiError:
        status = response.status_code
        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = None
        code = body.get("error") if isinstance(body, dict) else None
        if not isinstance(code, str) or not code:
            return ApiError(status_code(status), status, body)
        return ApiError(code, status, body, _field_errors(body.get("fields")))


def _field_errors(raw: Any) -> tuple[FieldError, ...]:
    """Validate ``fields`` on its own; a malformed list never costs the error code."""
    if not raw:
        return ()
    try:
        return tuple(_adapter(list[FieldError]).validate_python(raw))
    except SchemaValidationError:
        return ()
