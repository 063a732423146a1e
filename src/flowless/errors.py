"""Library exceptions. Minimal set: step exceptions pass through unmodified."""

from __future__ import annotations

from typing import Any


class FlowlessError(Exception):
    """Base exception for all errors raised by flowless itself."""

    pass


class ArityError(FlowlessError, TypeError):
    """Raised when curry() cannot determine how many arguments a callable takes.

    Attributes:
        fn: The callable that could not be inspected.
    """

    def __init__(self, fn: Any) -> None:
        self.fn = fn
        name = getattr(fn, "__name__", type(fn).__name__)
        super().__init__(f"Cannot determine the arity of '{name}'")


class UnsupportedCollectionError(FlowlessError, TypeError):
    """Raised when for_each() receives a value it does not know how to iterate.

    Attributes:
        collection: The offending value.
    """

    def __init__(self, collection: Any) -> None:
        self.collection = collection
        super().__init__(
            f"for_each expects a sequence, a mapping or an iterable, "
            f"got {type(collection).__name__}"
        )
