"""Exception types for the Result channel.

- ResultException: structured payload raised when a Fail is forced to throw
- MissingHandlerError: maybe_when() called without the matching handler
- UnwrapError: unwrap() on a Fail whose error is not an exception
"""

from .errors import MissingHandlerError, ResultException, UnwrapError

__all__ = [
    "ResultException",
    "MissingHandlerError",
    "UnwrapError",
]
