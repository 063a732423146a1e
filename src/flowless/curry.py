"""curry(): partial application that waits for awaitable arguments.

    @curry
    def add_mul(a, b, c):
        return (a + b) * c

    add_mul(2)(3)(5)                        # -> 25
    await add_mul(2, fetch_three())(5)      # -> 25

A curried function collects positional arguments over any number of calls.
Once enough have been supplied, the original function runs: directly when
every argument is a plain value, or inside a coroutine that first awaits the
awaitable ones.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from typing import Any

from flowless.errors import ArityError
from flowless.thenable import any_async, resolve, resolve_all

_COUNTED = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _signature(fn: Callable[..., Any]) -> inspect.Signature:
    try:
        return inspect.signature(fn)
    except (TypeError, ValueError) as e:
        raise ArityError(fn) from e


def _required(sig: inspect.Signature) -> int:
    return sum(
        1 for p in sig.parameters.values() if p.kind in _COUNTED and p.default is inspect.Parameter.empty
    )


def _without_bound(sig: inspect.Signature, count: int) -> inspect.Signature:
    """``sig`` minus its first ``count`` positional parameters."""
    params = []
    for p in sig.parameters.values():
        if count and p.kind in _COUNTED:
            count -= 1
            continue
        params.append(p)
    return sig.replace(parameters=params)


def arity(fn: Callable[..., Any]) -> int:
    """Number of positional parameters of ``fn`` that have no default.

    A partially applied Curried reports only the parameters still unbound.

    Raises:
        ArityError: If the signature of ``fn`` cannot be inspected.
    """
    return _required(_signature(fn))


class Curried:
    """A function plus the arguments bound to it so far.

    Instances are never mutated: every partial call returns a new Curried,
    so each one can be reused independently.

    Attributes:
        fn: The original function.
        arity: Positional arguments required before ``fn`` runs.
        args: Positional arguments bound so far.
        keywords: Keyword arguments bound so far.
    """

    def __init__(
        self,
        fn: Callable[..., Any],
        args: tuple[Any, ...] = (),
        keywords: dict[str, Any] | None = None,
        *,
        signature: inspect.Signature | None = None,
    ) -> None:
        if not callable(fn):
            raise TypeError(f"curry() requires a callable, got {type(fn).__name__}")
        full = _signature(fn) if signature is None else signature
        functools.update_wrapper(self, fn)
        self.fn = fn
        self.arity = _required(full)
        self.args = args
        self.keywords = dict(keywords or {})
        self._full_signature = full
        # What inspect.signature() reports: only the parameters still unbound.
        self.__signature__ = _without_bound(full, len(args))

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        bound = self.args + args
        keywords = {**self.keywords, **kwargs}
        if len(bound) < self.arity:
            return Curried(self.fn, bound, keywords, signature=self._full_signature)

        if any_async(bound) or any_async(list(keywords.values())):
            return self._call_deferred(bound, keywords)
        return self.fn(*bound, **keywords)

    async def _call_deferred(self, args: tuple[Any, ...], keywords: dict[str, Any]) -> Any:
        # A failing argument propagates here and fn is never called.
        resolved = await resolve_all([*args, *keywords.values()])
        kwargs = dict(zip(keywords, resolved[len(args):], strict=True))
        result = self.fn(*resolved[: len(args)], **kwargs)
        return await resolve(result)

    def __repr__(self) -> str:
        name = getattr(self.fn, "__qualname__", None) or repr(self.fn)
        bound = [repr(a) for a in self.args] + [f"{k}={v!r}" for k, v in self.keywords.items()]
        return f"curry({name})({', '.join(bound)})"


def curry(fn: Callable[..., Any]) -> Curried:
    """Curry ``fn`` on its positional parameters without defaults.

    Usable as a decorator. Arguments may be supplied in any grouping:
    ``curry(f)(a)(b)(c) == curry(f)(a, b)(c) == curry(f)(a, b, c) == f(a, b, c)``.

    Raises:
        ArityError: If the signature of ``fn`` cannot be inspected.
    """
    return Curried(fn)
