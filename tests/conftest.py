"""Shared steps and awaitable helpers for flowless tests."""

from __future__ import annotations

import asyncio
from collections.abc import Generator
from typing import Any


def add_one(x: int) -> int:
    return x + 1


def double(x: int) -> int:
    return x * 2


def to_string(x: int) -> str:
    return str(x)


def always_fail(x: Any) -> Any:
    raise ValueError("intentional failure")


async def later(value: Any, delay: float = 0) -> Any:
    """Coroutine resolving to ``value`` after ``delay`` seconds."""
    await asyncio.sleep(delay)
    return value


async def fail_later(error: Exception) -> Any:
    await asyncio.sleep(0)
    raise error


async def async_add_one(x: int) -> int:
    await asyncio.sleep(0)
    return x + 1


class Deferred:
    """Minimal awaitable that is neither a coroutine nor an asyncio future."""

    def __init__(self, value: Any) -> None:
        self.value = value

    def __await__(self) -> Generator[Any, None, Any]:
        yield from asyncio.sleep(0).__await__()
        return self.value
