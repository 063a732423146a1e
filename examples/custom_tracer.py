"""Custom tracer that writes JSON lines to a file."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from flowless import compose


class JSONLTracer:
    """Tracer implementation that appends events to a JSONL file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _write(self, record: dict[str, Any]) -> None:
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, default=repr) + "\n")

    def on_pipeline_start(self, ctx) -> None:  # type: ignore[no-untyped-def]
        self._write({"event": "pipeline_start", "run_id": ctx.run_id})

    def on_pipeline_end(self, ctx) -> None:  # type: ignore[no-untyped-def]
        self._write({"event": "pipeline_end", "summary": ctx.summary()})

    def on_step_start(self, ctx, step_name, input_data):  # type: ignore[no-untyped-def]
        self._write({"event": "step_start", "step": step_name, "input": input_data})

    def on_step_end(self, ctx, step_name, result):  # type: ignore[no-untyped-def]
        self._write({"event": "step_end", "step": step_name, "result": result})

    def on_step_error(self, ctx, step_name, error):  # type: ignore[no-untyped-def]
        self._write({"event": "step_error", "step": step_name, "error": str(error)})

    def on_catch(self, ctx, step_name, error):  # type: ignore[no-untyped-def]
        self._write({"event": "catch", "step": step_name, "error": str(error)})

    def on_deferred(self, ctx, step_name):  # type: ignore[no-untyped-def]
        self._write({"event": "deferred", "step": step_name})


async def greet(name: str) -> str:
    await asyncio.sleep(0)
    return f"Hello, {name}!"


async def main() -> None:
    pipeline = compose(str.strip, greet, name="custom", tracer=JSONLTracer("./trace.jsonl"))
    print(await pipeline("  flowless  "))


if __name__ == "__main__":
    asyncio.run(main())
