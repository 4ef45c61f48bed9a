"""Sync/async interoperability for Result combinators.

Combinators accept either plain callables or coroutine functions. Instead of
duplicating every combinator for both flavours, each one funnels the handler's
return value through ``maybe_await``:

    - maybe_await: await a value if it is awaitable, return it otherwise
    - run_sync: drive an awaitable to completion from synchronous code

Example:
    >>> async def double(x: int) -> int:
    ...     return x * 2
    >>> run_sync(maybe_await(double(21)))
    42
    >>> run_sync(maybe_await(42))
    42
"""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, TypeVar, cast

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")


async def maybe_await(value: T | Awaitable[T]) -> T:
    """Await value if awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return cast(T, value)


def run_sync(awaitable: Awaitable[T]) -> T:
    """Run an awaitable to completion from synchronous code.

    Raises:
        RuntimeError: If called from inside a running event loop (await instead)
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_as_coroutine(awaitable))
    raise RuntimeError("run_sync() called from a running event loop; await the result instead")


async def _as_coroutine(awaitable: Awaitable[T]) -> T:
    return await awaitable
