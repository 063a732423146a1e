"""Inclusive integer ranges and a for_each over sequences, ranges and mappings."""

from __future__ import annotations

import builtins
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from flowless.errors import UnsupportedCollectionError


@dataclass(frozen=True, repr=False, slots=True)
class Range:
    """Lazy, restartable, inclusive run of integers from ``start`` to ``end``.

    ``step`` is +1 or -1, derived from the bounds. Every ``iter()`` starts over
    from ``start``.
    """

    start: int
    end: int
    step: int = field(init=False)

    def __post_init__(self) -> None:
        for bound in (self.start, self.end):
            if isinstance(bound, bool) or not isinstance(bound, int):
                raise TypeError(f"range bounds must be integers, got {type(bound).__name__}")
        object.__setattr__(self, "step", -1 if self.start > self.end else 1)

    def __iter__(self) -> Iterator[int]:
        return iter(builtins.range(self.start, self.end + self.step, self.step))

    def __reversed__(self) -> Iterator[int]:
        return iter(builtins.range(self.end, self.start - self.step, -self.step))

    def __len__(self) -> int:
        return abs(self.end - self.start) + 1

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, int):
            return False
        low, high = sorted((self.start, self.end))
        return low <= value <= high

    def __repr__(self) -> str:
        return f"Range({self.start}, {self.end})"


def range(a: int, b: int | None = None) -> Range:
    """Inclusive range.

    ``range(a)`` runs from 0 to ``a`` (descending when ``a`` is negative);
    ``range(a, b)`` runs from ``a`` to ``b`` (descending when ``a > b``).

        list(range(5))      # [0, 1, 2, 3, 4, 5]
        list(range(-5))     # [0, -1, -2, -3, -4, -5]
        list(range(10, 5))  # [10, 9, 8, 7, 6, 5]
    """
    if b is None:
        return Range(0, a)
    return Range(a, b)


def for_each(callback: Callable[[Any, Any, Any], Any], collection: Any) -> None:
    """Call ``callback(value, key, collection)`` for every element.

    The shape is picked once per call:

    - mapping (``keys`` and ``__getitem__``): key order as given by ``keys()``
    - indexed sequence (``__len__`` and ``__getitem__``): index 0 to n-1
    - generated sequence such as a Range (``__iter__``): position in
      generation order, counted from 0

    The callback's return value is ignored and there is no early exit.

    Raises:
        UnsupportedCollectionError: If ``collection`` matches none of the shapes.
    """
    if hasattr(collection, "keys") and hasattr(collection, "__getitem__"):
        for key in list(collection.keys()):
            callback(collection[key], key, collection)
    elif hasattr(collection, "__len__") and hasattr(collection, "__getitem__"):
        for index in builtins.range(len(collection)):
            callback(collection[index], index, collection)
    elif hasattr(collection, "__iter__"):
        for position, value in enumerate(collection):
            callback(value, position, collection)
    else:
        raise UnsupportedCollectionError(collection)
