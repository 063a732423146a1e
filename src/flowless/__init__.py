"""Flowless: compose plain functions over plain and awaitable values.

Write the pipeline once; await it only when something in it is async.
"""

from flowless.catch import Catch, catch, is_catch
from flowless.context import Context, StepTiming
from flowless.curry import Curried, arity, curry
from flowless.errors import ArityError, FlowlessError, UnsupportedCollectionError
from flowless.iteration import Range, for_each, range
from flowless.pipeline import Pipeline, compose
from flowless.thenable import is_async
from flowless.tracer import NullTracer, StdoutTracer, Tracer

__version__ = "0.1.0"

__all__ = [
    "compose",
    "Pipeline",
    "catch",
    "Catch",
    "is_catch",
    "curry",
    "Curried",
    "arity",
    "is_async",
    "range",
    "Range",
    "for_each",
    "Context",
    "StepTiming",
    "Tracer",
    "NullTracer",
    "StdoutTracer",
    "FlowlessError",
    "ArityError",
    "UnsupportedCollectionError",
]
