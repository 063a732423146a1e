"""Pipeline: the composition engine.

A Pipeline runs a sequence of steps, passing each step's output as the next
step's input. The same pipeline accepts plain and awaitable values:

    pipeline = compose(parse, double)
    pipeline("21")                          # -> 42
    await pipeline(fetch_text())            # -> 42

CRITICAL DESIGN DECISIONS:
  1. Sync or deferred mode is decided per call. A call whose arguments and
     step results are all plain runs on the caller's stack and returns a plain
     value; no coroutine is created.
  2. The first awaitable seen (an argument, a step result, a handler result)
     switches the rest of that call to deferred mode: the call returns a
     coroutine that awaits it and continues with the next step. Steps already
     run are not repeated and steps never run concurrently.
  3. Exceptions are never wrapped. A failure goes to the nearest downstream
     catch marker, or propagates to the caller unchanged.
"""

from __future__ import annotations

from collections.abc import Generator, Iterable
from typing import Any

from flowless._types import StepFn
from flowless.catch import Catch, is_catch
from flowless.context import Context
from flowless.thenable import any_async, is_async, resolve_all
from flowless.tracer import NullTracer, Tracer

# The fold yields awaitables and is sent their results back.
_Fold = Generator[Any, Any, Any]


class Pipeline:
    """An immutable, reusable sequence of steps and catch markers.

    Usage:
        pipeline = compose(add_one, catch(on_error), double)
        pipeline(4)                             # -> 10
        pipeline = pipeline.use(StdoutTracer()) # opt-in tracing, new Pipeline
        pipeline = pipeline >> to_string       # extend, new Pipeline
    """

    __slots__ = ("_steps", "name", "_tracer")

    def __init__(
        self,
        steps: Iterable[StepFn | Catch] = (),
        *,
        name: str = "pipeline",
        tracer: Tracer | None = None,
    ) -> None:
        steps = tuple(steps)
        for s in steps:
            if not (is_catch(s) or callable(s)):
                raise TypeError(f"Pipeline steps must be callables or catch markers, got {type(s).__name__}")
        object.__setattr__(self, "_steps", steps)
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "_tracer", tracer or NullTracer())

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Pipeline is read-only; use >> or use() to derive a new one")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Pipeline is read-only")

    @property
    def steps(self) -> tuple[Any, ...]:
        return self._steps

    @property
    def tracer(self) -> Tracer:
        return self._tracer

    def use(self, tracer: Tracer) -> Pipeline:
        """Return a copy of this pipeline with ``tracer`` attached.

        Args:
            tracer: Any object implementing the Tracer protocol.
        """
        return Pipeline(self._steps, name=self.name, tracer=tracer)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        """Run the pipeline.

        The first step receives ``*args, **kwargs``; every later step receives
        the previous result. Returns the last result directly, or a coroutine
        resolving to it once an awaitable has been observed.

        Raises:
            Exception: Whatever a step raised, when no catch marker handled it
                and the call was still synchronous.
        """
        ctx = Context(pipeline_name=self.name)
        self._tracer.on_pipeline_start(ctx)

        fold = self._fold(ctx, args, kwargs)
        try:
            pending = fold.send(None)
        except StopIteration as stop:
            outcome = stop.value
        else:
            return self._drive(ctx, fold, pending)
        finally:
            if ctx.mode == "sync":
                self._tracer.on_pipeline_end(ctx)

        return _settle(outcome)

    async def _drive(self, ctx: Context, fold: _Fold, pending: Any) -> Any:
        """Await each value the fold yields and send the outcome back in.

        A StopIteration left unhandled cannot leave a coroutine as is; Python
        reraises it as RuntimeError with the original as ``__cause__``.
        """
        try:
            while True:
                try:
                    value = await pending
                except Exception as e:
                    pending = fold.throw(e)
                else:
                    pending = fold.send(value)
        except StopIteration as stop:
            outcome = stop.value
        finally:
            self._tracer.on_pipeline_end(ctx)

        return _settle(outcome)

    def _fold(self, ctx: Context, args: tuple[Any, ...], kwargs: dict[str, Any]) -> _Fold:
        steps = self._steps
        tracer = self._tracer
        error: Exception | None = None
        value: Any = None
        started = False

        if any_async(args) or any_async(list(kwargs.values())):
            self._defer(ctx, "<input>")
            try:
                resolved = yield resolve_all([*args, *kwargs.values()])
            except Exception as e:
                error = e
            else:
                kwargs = dict(zip(kwargs, resolved[len(args):], strict=True))
                args = tuple(resolved[: len(args)])

        index = 0
        while True:
            if error is not None:
                index = self._next_catch(index)
                if index < 0:
                    return _Failed(error)
                marker: Catch = steps[index]
                name = marker.name
                tracer.on_catch(ctx, name, error)
                fn, call_args, call_kwargs = marker.handle, (error,), {}
                input_data: Any = error
                kind = "catch"
                error = None
            else:
                while index < len(steps) and is_catch(steps[index]):
                    index += 1
                if index >= len(steps):
                    break
                fn = steps[index]
                name = _step_name(fn)
                kind = "step"
                if started:
                    call_args, call_kwargs, input_data = (value,), {}, value
                else:
                    call_args, call_kwargs, input_data = args, kwargs, _identity(args)

            timing = ctx.start_step(name, kind=kind)
            tracer.on_step_start(ctx, name, input_data)
            try:
                result = fn(*call_args, **call_kwargs)
                if is_async(result):
                    self._defer(ctx, name)
                    result = yield result
            except Exception as e:
                timing.finish(error=e)
                tracer.on_step_error(ctx, name, e)
                error = e
            else:
                timing.finish()
                tracer.on_step_end(ctx, name, result)
                value = result
                started = True
            index += 1

        return value if started else _identity(args)

    def _next_catch(self, start: int) -> int:
        for i in range(start, len(self._steps)):
            if is_catch(self._steps[i]):
                return i
        return -1

    def _defer(self, ctx: Context, step_name: str) -> None:
        if ctx.mode == "sync":
            ctx.mark_deferred(step_name)
            self._tracer.on_deferred(ctx, step_name)

    def __rshift__(self, other: Any) -> Pipeline:
        """Extend: pipeline >> step, pipeline >> catch(...), pipeline >> pipeline."""
        if isinstance(other, Pipeline):
            return Pipeline(self._steps + other._steps, name=self.name, tracer=self._tracer)
        if is_catch(other) or callable(other):
            return Pipeline(self._steps + (other,), name=self.name, tracer=self._tracer)
        return NotImplemented

    def __rrshift__(self, other: Any) -> Pipeline:
        if is_catch(other) or callable(other):
            return Pipeline((other,) + self._steps, name=self.name, tracer=self._tracer)
        return NotImplemented

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return " >> ".join(_step_name(s) for s in self._steps) or "Pipeline()"


def compose(*steps: StepFn | Catch, name: str = "pipeline", tracer: Tracer | None = None) -> Pipeline:
    """Compose steps left to right: ``compose(f, g)(x) == g(f(x))``.

    Steps are plain callables or catch markers. With no steps the pipeline is
    the identity function.

    Args:
        *steps: Callables and catch markers in execution order.
        name: Pipeline name reported to the tracer.
        tracer: Optional tracer; defaults to NullTracer.
    """
    return Pipeline(steps, name=name, tracer=tracer)


def _identity(args: tuple[Any, ...]) -> Any:
    if not args:
        return None
    if len(args) == 1:
        return args[0]
    return args


def _step_name(step: Any) -> str:
    name = getattr(step, "name", None)
    if isinstance(name, str):
        return name
    return getattr(step, "__name__", None) or type(step).__name__


class _Failed:
    """Outcome of a fold that ended with an unhandled exception.

    The fold returns it instead of raising, so a StopIteration raised by a
    step is not turned into RuntimeError on its way out of the generator.
    """

    __slots__ = ("error",)

    def __init__(self, error: Exception) -> None:
        self.error = error


def _settle(outcome: Any) -> Any:
    if isinstance(outcome, _Failed):
        raise outcome.error
    return outcome
