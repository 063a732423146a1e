"""Minimal flowless example: one pipeline, called with plain and async input."""

from __future__ import annotations

import asyncio

from flowless import catch, compose, curry


@curry
def add(a: int, b: int) -> int:
    return a + b


def parse(text: str) -> int:
    return int(text)


async def fetch(text: str) -> str:
    await asyncio.sleep(0.1)
    return text


pipeline = compose(parse, catch(lambda e: 0), add(10))


async def main() -> None:
    print("Sync result:", pipeline("32"))
    print("Recovered:", pipeline("not a number"))
    print("Async result:", await pipeline(fetch("32")))


if __name__ == "__main__":
    asyncio.run(main())
