"""Result type with success/fail variants and an async-transparent combinator algebra.

Example:
    >>> from fallible.monads import Result, success, fail
    >>>
    >>> def divide(a: int, b: int) -> Result[float]:
    ...     if b == 0:
    ...         return fail(ZeroDivisionError("division by zero"), title="Math")
    ...     return success(a / b)
    >>>
    >>> divide(10, 2).unwrap()
    5.0
    >>> divide(1, 0).unwrap_or(0.0)
    0.0
"""

from .result import (
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

__all__ = [
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
    # Collection operations
    "sequence",
    "traverse",
]
