from __future__ import annotations

import inspect
import io

import pytest

from flowless import Context, NullTracer, StdoutTracer, Tracer, catch, compose
from tests.conftest import add_one, always_fail, double, later


class MockTracer:
    def __init__(self) -> None:
        self.started = 0
        self.ended: list[Context] = []
        self.step_starts: list[str] = []
        self.step_ends: list[str] = []
        self.errors: list[Exception] = []
        self.catches: list[str] = []
        self.deferred: list[str] = []

    def on_pipeline_start(self, ctx) -> None:  # type: ignore[no-untyped-def]
        self.started += 1

    def on_pipeline_end(self, ctx) -> None:  # type: ignore[no-untyped-def]
        self.ended.append(ctx)

    def on_step_start(self, ctx, step_name, input_data):  # type: ignore[no-untyped-def]
        self.step_starts.append(step_name)

    def on_step_end(self, ctx, step_name, result):  # type: ignore[no-untyped-def]
        self.step_ends.append(step_name)

    def on_step_error(self, ctx, step_name, error):  # type: ignore[no-untyped-def]
        self.errors.append(error)

    def on_catch(self, ctx, step_name, error):  # type: ignore[no-untyped-def]
        self.catches.append(step_name)

    def on_deferred(self, ctx, step_name):  # type: ignore[no-untyped-def]
        self.deferred.append(step_name)


def test_tracer_protocol_is_structural() -> None:
    assert isinstance(MockTracer(), Tracer)
    assert isinstance(NullTracer(), Tracer)
    assert isinstance(StdoutTracer(), Tracer)


def test_null_tracer_noop() -> None:
    tracer = NullTracer()
    ctx = Context(pipeline_name="noop")

    tracer.on_pipeline_start(ctx)
    tracer.on_step_start(ctx, "step", None)
    tracer.on_step_end(ctx, "step", "ok")
    tracer.on_catch(ctx, "catch", ValueError())
    tracer.on_deferred(ctx, "step")
    tracer.on_pipeline_end(ctx)


def test_sync_pipeline_tracing() -> None:
    tracer = MockTracer()
    result = compose(add_one, double, tracer=tracer)(2)

    assert result == 6
    assert not inspect.isawaitable(result)
    assert tracer.started == 1
    assert tracer.step_starts == ["add_one", "double"]
    assert tracer.step_ends == ["add_one", "double"]
    assert tracer.deferred == []
    assert tracer.ended[0].mode == "sync"
    assert [t.step_name for t in tracer.ended[0].timings] == ["add_one", "double"]


def test_tracing_errors_and_catches() -> None:
    tracer = MockTracer()
    pipeline = compose(always_fail, catch(lambda e: 1, name="fallback"), double).use(tracer)

    assert pipeline(0) == 2
    assert isinstance(tracer.errors[0], ValueError)
    assert tracer.catches == ["fallback"]
    assert tracer.step_starts == ["always_fail", "fallback", "double"]
    assert len(tracer.ended[0].failed_steps) == 1


def test_pipeline_end_fires_when_sync_call_raises() -> None:
    tracer = MockTracer()
    with pytest.raises(ValueError):
        compose(always_fail, tracer=tracer)(1)
    assert len(tracer.ended) == 1


def test_use_returns_new_pipeline() -> None:
    base = compose(add_one)
    traced = base.use(MockTracer())
    assert traced is not base
    assert isinstance(base.tracer, NullTracer)
    assert isinstance(traced.tracer, MockTracer)


@pytest.mark.asyncio
async def test_deferred_pipeline_tracing() -> None:
    tracer = MockTracer()
    pending = compose(add_one, lambda x: later(x), double, tracer=tracer)(1)

    assert tracer.deferred == ["<lambda>"]
    assert tracer.ended == []

    assert await pending == 4
    ctx = tracer.ended[0]
    assert ctx.mode == "deferred"
    assert ctx.deferred_at == "<lambda>"
    assert tracer.step_ends == ["add_one", "<lambda>", "double"]


@pytest.mark.asyncio
async def test_async_input_is_traced() -> None:
    tracer = MockTracer()
    assert await compose(add_one, tracer=tracer)(later(1)) == 2
    assert tracer.deferred == ["<input>"]


def test_stdout_tracer_output(capsys) -> None:  # type: ignore[no-untyped-def]
    pipeline = compose(add_one, always_fail, catch(lambda e: 0), name="trace")
    pipeline.use(StdoutTracer(verbose=True))(1)

    captured = capsys.readouterr().err
    assert "Pipeline 'trace' started" in captured
    assert "add_one (input: 1)" in captured
    assert "always_fail FAILED" in captured
    assert "handling ValueError" in captured
    assert "finished" in captured


def test_stdout_tracer_custom_stream_truncates() -> None:
    stream = io.StringIO()
    tracer = StdoutTracer(verbose=True, max_repr=10, stream=stream)
    compose(len, tracer=tracer)("x" * 50)

    assert "..." in stream.getvalue()


def test_context_records_handler_entries() -> None:
    tracer = MockTracer()
    compose(always_fail, catch(lambda e: 1, name="fallback"), double, tracer=tracer)(0)

    ctx = tracer.ended[0]
    assert [(t.step_name, t.kind) for t in ctx.timings] == [
        ("always_fail", "step"),
        ("fallback", "catch"),
        ("double", "step"),
    ]
    assert [c["name"] for c in ctx.summary()["catches"]] == ["fallback"]
