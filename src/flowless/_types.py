"""Internal type aliases used across the library."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

# Steps can have any signature; only the first step sees more than one argument.
# A step may return a plain value or an awaitable resolving to one.
StepFn = Callable[..., Any]

# A catch handler receives the raised exception.
Handler = Callable[[Exception], Any]
