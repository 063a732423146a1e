"""Execution record for a single pipeline invocation."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Literal

EntryKind = Literal["step", "catch"]


@dataclass
class StepTiming:
    """One executed pipeline element: a step, or a catch handler that ran.

    Attributes:
        step_name: Step or marker name.
        kind: "step" for forward steps, "catch" for handlers of a failure.
        started_at / ended_at: Monotonic clock readings.
        duration_ms: Wall time including any await on the element's result.
        error: Exception raised by the element, if any.
    """

    step_name: str
    started_at: float
    kind: EntryKind = "step"
    ended_at: float | None = None
    duration_ms: float | None = None
    error: Exception | None = None

    def finish(self, error: Exception | None = None) -> None:
        self.ended_at = time.monotonic()
        self.duration_ms = (self.ended_at - self.started_at) * 1000
        self.error = error

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.step_name,
            "duration_ms": None if self.duration_ms is None else round(self.duration_ms, 2),
            "error": None if self.error is None else repr(self.error),
        }


@dataclass
class Context:
    """Execution context for one pipeline invocation.

    A new Context is created for every call of a pipeline and handed to its
    tracer; nothing in it is shared between invocations.

    Attributes:
        run_id: Unique identifier for this invocation.
        pipeline_name: Name of the pipeline being executed.
        mode: "sync" until the first awaitable is observed, then "deferred".
        deferred_at: Name of the step whose input or output first was awaitable.
        timings: Steps and handlers in execution order.
    """

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    pipeline_name: str = ""
    mode: Literal["sync", "deferred"] = "sync"
    deferred_at: str | None = None
    timings: list[StepTiming] = field(default_factory=list)

    def start_step(self, step_name: str, kind: EntryKind = "step") -> StepTiming:
        """Record the start of a step or handler. Finish the returned entry later."""
        timing = StepTiming(step_name=step_name, started_at=time.monotonic(), kind=kind)
        self.timings.append(timing)
        return timing

    def mark_deferred(self, step_name: str) -> None:
        """Switch to deferred mode, remembering the first step that caused it."""
        if self.mode == "sync":
            self.mode = "deferred"
            self.deferred_at = step_name

    @property
    def total_duration_ms(self) -> float:
        """Total duration of all completed entries in milliseconds."""
        return sum(t.duration_ms or 0.0 for t in self.timings)

    @property
    def failed_steps(self) -> list[StepTiming]:
        """Entries, steps or handlers, that ended with an error."""
        return [t for t in self.timings if t.error is not None]

    @property
    def handled(self) -> list[StepTiming]:
        """Catch handlers that ran during this invocation."""
        return [t for t in self.timings if t.kind == "catch"]

    def summary(self) -> dict[str, Any]:
        """Return a summary dict suitable for logging; handlers are listed apart from steps."""
        return {
            "run_id": self.run_id,
            "pipeline": self.pipeline_name,
            "mode": self.mode,
            "deferred_at": self.deferred_at,
            "total_duration_ms": round(self.total_duration_ms, 2),
            "steps": [t.describe() for t in self.timings if t.kind == "step"],
            "catches": [t.describe() for t in self.handled],
        }
