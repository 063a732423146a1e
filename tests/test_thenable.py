from __future__ import annotations

import asyncio

import pytest

from flowless import is_async
from flowless.thenable import resolve, resolve_all
from tests.conftest import Deferred, fail_later, later


@pytest.mark.asyncio
async def test_is_async_native_awaitables() -> None:
    coro = later(1)
    future = asyncio.get_running_loop().create_future()
    task = asyncio.ensure_future(later(2))

    assert is_async(coro)
    assert is_async(future)
    assert is_async(task)

    future.cancel()
    await coro
    await task


def test_is_async_duck_typed() -> None:
    assert is_async(Deferred(1))


@pytest.mark.parametrize("value", [1, "text", None, [later], {"a": 1}, later, object()])
def test_is_async_plain_values(value: object) -> None:
    assert is_async(value) is False


def test_is_async_then_method_is_not_enough() -> None:
    class Impostor:
        def then(self) -> None: ...

    assert is_async(Impostor()) is False


@pytest.mark.asyncio
async def test_resolve() -> None:
    assert await resolve(later(3)) == 3
    assert await resolve(3) == 3


@pytest.mark.asyncio
async def test_resolve_all_keeps_order() -> None:
    values = [later("a", 0.02), "b", Deferred("c"), later("d")]
    assert await resolve_all(values) == ["a", "b", "c", "d"]


@pytest.mark.asyncio
async def test_resolve_all_plain_values() -> None:
    assert await resolve_all([1, 2]) == [1, 2]
    assert await resolve_all([]) == []


@pytest.mark.asyncio
async def test_resolve_all_propagates_failure() -> None:
    with pytest.raises(KeyError):
        await resolve_all([1, fail_later(KeyError("k"))])
