"""Shared CLI infrastructure helpers.

Every command runs in its own event loop with a freshly built AppContext; the
context (and its HTTP connection pool) is closed when the command finishes.
Tests replace ``build_context`` to inject a mock transport and in-memory storage.
"""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from py_bankclient.sdk.bootstrap import AppContext, init_app

__all__ = ["build_context", "run_with_context"]

T = TypeVar("T")


def build_context() -> AppContext:
    return init_app()


def run_with_context(
    fn: Callable[[AppContext], Awaitable[T]],
    *,
    restore: bool = True,
) -> T:
    """Run ``fn(ctx)`` with a fresh AppContext.

    Steps:
    1. Build the context (settings, client, token storage, session).
    2. When ``restore`` is set, restore the session from the stored token.
    3. Invoke fn(ctx); exceptions propagate to the command's error handler.
    """

    async def _driver() -> T:
        async with build_context() as ctx:
            if restore:
                await ctx.session.refresh()
            return await fn(ctx)

    return asyncio.run(_driver())
