"""Fallible - type-safe Result type for operations that succeed or fail.

A Result is exactly one of two immutable variants:
- Success: holds a result value with optional title/message
- Fail: holds an untyped error with optional stack trace/title/message

Expected failures travel as values. When host code needs exception-based
abort semantics, ``result`` and ``throw_when_fail()`` raise a structured
ResultException instead.

Quick Start:
    >>> from fallible import Result, success, fail
    >>>
    >>> def parse_port(raw: str) -> Result[int]:
    ...     if not raw.isdigit():
    ...         return fail(ValueError(raw), title="Invalid port", message=f"{raw!r} is not a number")
    ...     return success(int(raw))
    >>>
    >>> parse_port("8080").unwrap()
    8080
    >>> parse_port("http").unwrap_or(80)
    80

Async-transparent combinators:
    >>> async def resolve(raw: str) -> Result[str]:
    ...     checked = parse_port(raw).ensure(lambda p: p < 65536, message="port out of range")
    ...     return await checked.map_success(lambda p: f"localhost:{p}")

Collections:
    >>> from fallible import sequence
    >>> sequence([success(1), success(2)]).result
    [1, 2]
"""

from __future__ import annotations

__version__ = "0.1.0"

from .errors import MissingHandlerError, ResultException, UnwrapError
from .monads import (
    DEFAULT_SUCCESS,
    DefaultSuccess,
    Fail,
    Result,
    Success,
    attempt,
    attempt_async,
    default_error,
    empty_fail,
    empty_success,
    fail,
    sequence,
    success,
    traverse,
)
from .runtime import maybe_await, run_sync

__all__ = [
    "__version__",
    # Core types
    "Result",
    "Success",
    "Fail",
    # Constructors
    "success",
    "fail",
    "empty_success",
    "empty_fail",
    "attempt",
    "attempt_async",
    # Canonical defaults
    "DEFAULT_SUCCESS",
    "DefaultSuccess",
    "default_error",
    # Collections
    "sequence",
    "traverse",
    # Errors
    "ResultException",
    "MissingHandlerError",
    "UnwrapError",
    # Interop
    "maybe_await",
    "run_sync",
]
