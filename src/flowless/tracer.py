"""Tracer protocol and built-in StdoutTracer.

Tracers are opt-in. A pipeline with no tracer attached runs silently.
Custom tracers implement the Tracer protocol; no base class inheritance required.

Hooks are plain functions, not coroutines: a synchronous pipeline run must
never create an awaitable, tracing included.
"""

from __future__ import annotations

import sys
from typing import Any, Protocol, TextIO, runtime_checkable

from flowless.context import Context


@runtime_checkable
class Tracer(Protocol):
    """Protocol for pipeline tracers.

    Using Protocol (not ABC) so any object with matching methods works, no inheritance needed.
    """

    def on_pipeline_start(self, ctx: Context) -> None: ...
    def on_pipeline_end(self, ctx: Context) -> None: ...
    def on_step_start(self, ctx: Context, step_name: str, input_data: Any) -> None: ...
    def on_step_end(self, ctx: Context, step_name: str, result: Any) -> None: ...
    def on_step_error(self, ctx: Context, step_name: str, error: Exception) -> None: ...
    def on_catch(self, ctx: Context, step_name: str, error: Exception) -> None: ...
    def on_deferred(self, ctx: Context, step_name: str) -> None: ...


class NullTracer:
    """Default tracer that does nothing."""

    def on_pipeline_start(self, ctx: Context) -> None:
        pass

    def on_pipeline_end(self, ctx: Context) -> None:
        pass

    def on_step_start(self, ctx: Context, step_name: str, input_data: Any) -> None:
        pass

    def on_step_end(self, ctx: Context, step_name: str, result: Any) -> None:
        pass

    def on_step_error(self, ctx: Context, step_name: str, error: Exception) -> None:
        pass

    def on_catch(self, ctx: Context, step_name: str, error: Exception) -> None:
        pass

    def on_deferred(self, ctx: Context, step_name: str) -> None:
        pass


class StdoutTracer:
    """Simple tracer that prints to stderr. Useful for development.

    Usage:
        pipeline = compose(parse, double, tracer=StdoutTracer())
    """

    def __init__(self, verbose: bool = False, max_repr: int = 80, stream: TextIO | None = None) -> None:
        self.verbose = verbose
        self.max_repr = max_repr
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees the output.
        return self._stream or sys.stderr

    def on_pipeline_start(self, ctx: Context) -> None:
        print(f"▶ Pipeline '{ctx.pipeline_name}' started [run={ctx.run_id}]", file=self.stream)

    def on_pipeline_end(self, ctx: Context) -> None:
        summary = ctx.summary()
        status = "✓" if not ctx.failed_steps else "✗"
        print(
            f"{status} Pipeline '{ctx.pipeline_name}' finished "
            f"[{summary['total_duration_ms']}ms, {len(summary['steps'])} steps, "
            f"{len(summary['catches'])} caught, {ctx.mode}]",
            file=self.stream,
        )

    def on_step_start(self, ctx: Context, step_name: str, input_data: Any) -> None:
        print(f"  → {step_name}", file=self.stream, end="")
        if self.verbose:
            print(f" (input: {_truncate(input_data, self.max_repr)})", file=self.stream, end="")
        print(file=self.stream)

    def on_step_end(self, ctx: Context, step_name: str, result: Any) -> None:
        timing = ctx.timings[-1] if ctx.timings else None
        ms = f" [{timing.duration_ms:.1f}ms]" if timing and timing.duration_ms else ""
        print(f"  ✓ {step_name}{ms}", file=self.stream)

    def on_step_error(self, ctx: Context, step_name: str, error: Exception) -> None:
        print(f"  ✗ {step_name} FAILED: {error!r}", file=self.stream)

    def on_catch(self, ctx: Context, step_name: str, error: Exception) -> None:
        print(f"  ↺ {step_name} handling {type(error).__name__}", file=self.stream)

    def on_deferred(self, ctx: Context, step_name: str) -> None:
        print(f"  … deferred at {step_name}", file=self.stream)


def _truncate(obj: Any, max_len: int = 80) -> str:
    s = repr(obj)
    return s[:max_len] + "..." if len(s) > max_len else s
