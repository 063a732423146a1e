"""Detection and resolution of asynchronous values.

Anything awaitable counts as asynchronous: coroutines, asyncio futures and
tasks, or any object exposing ``__await__``. The check is a capability test,
never a class test, so third-party awaitables interoperate.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Sequence
from typing import Any


def is_async(value: Any) -> bool:
    """Return True if ``value`` can be awaited."""
    return inspect.isawaitable(value)


def any_async(values: Sequence[Any]) -> bool:
    """True if at least one of ``values`` is awaitable."""
    return any(inspect.isawaitable(v) for v in values)


async def resolve(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(value):
        return await value
    return value


async def resolve_all(values: Sequence[Any]) -> list[Any]:
    """Await every awaitable in ``values``, keeping positional order.

    Awaitables are gathered concurrently. The first failure propagates and
    the remaining results are discarded.
    """
    positions = [i for i, v in enumerate(values) if inspect.isawaitable(v)]
    resolved = list(values)
    if not positions:
        return resolved

    results = await asyncio.gather(*(values[i] for i in positions))
    for i, result in zip(positions, results, strict=True):
        resolved[i] = result
    return resolved
