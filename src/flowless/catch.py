"""Catch markers: error handlers placed inside a composed pipeline.

A marker is skipped while values flow forward. When a step before it fails,
the pipeline hands the exception to the nearest marker downstream and
continues with whatever the handler returns.

    pipeline = compose(parse, catch(lambda e: 0), double)
"""

from __future__ import annotations

from typing import Any

from flowless._types import Handler


class Catch:
    """Pipeline element wrapping a single error handler.

    Attributes:
        handler: Callable receiving the raised exception.
        name: Marker name used in tracing and repr (defaults to the handler name).
    """

    # Capability tag checked by the pipeline runner.
    __flowless_catch__ = True

    __slots__ = ("handler", "name")

    def __init__(self, handler: Handler, *, name: str | None = None) -> None:
        if not callable(handler):
            raise TypeError(f"catch() requires a callable handler, got {type(handler).__name__}")
        object.__setattr__(self, "handler", handler)
        object.__setattr__(self, "name", name or f"catch({getattr(handler, '__name__', 'handler')})")

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Catch markers are read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Catch markers are read-only")

    def handle(self, error: Exception) -> Any:
        """Invoke the handler. Called by the pipeline runner only."""
        return self.handler(error)

    def __rshift__(self, other: Any) -> Any:
        from flowless.pipeline import Pipeline

        return Pipeline((self,)) >> other

    def __repr__(self) -> str:
        return f"Catch({self.name})"


def catch(handler: Handler, *, name: str | None = None) -> Catch:
    """Create a catch marker. Only meaningful as an argument to compose()."""
    return Catch(handler, name=name)


def is_catch(value: Any) -> bool:
    """True if ``value`` carries the catch-marker tag, whatever its class."""
    return getattr(value, "__flowless_catch__", False) is True
