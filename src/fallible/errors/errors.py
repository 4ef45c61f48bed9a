"""Exception types raised at the edges of the Result channel.

ResultException is the structured payload raised when a Fail is forced into
exception-based control flow (the ``result`` accessor and ``throw_when_fail``).
Host middleware can recognize it by its four fields: error, title, message,
stack_trace.
"""

from __future__ import annotations

from typing import Any


class ResultException(Exception):
    """Exception wrapping a Fail's error with optional title, message and trace.

    Attributes:
        error: Underlying cause (any value, may be absent)
        title: Short human-readable context
        message: Longer human-readable detail
        stack_trace: Trace captured by the caller at failure time

    Equality covers error, title and message. The stack trace is excluded.

    Example:
        >>> str(ResultException("boom", title="Save"))
        'ResultException(Save): boom'
    """

    __slots__ = ("error", "title", "message", "stack_trace")

    def __init__(
        self,
        error: Any = None,
        *,
        title: str | None = None,
        message: str | None = None,
        stack_trace: Any = None,
    ) -> None:
        self.error = error
        self.title = title
        self.message = message
        self.stack_trace = stack_trace
        super().__init__(*(() if error is None else (error,)))

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @property
    def has_title(self) -> bool:
        return self.title is not None

    @property
    def has_message(self) -> bool:
        return self.message is not None

    def render(self) -> str:
        """Render as ``Type(title): error\\nmessage\\nstack_trace``, skipping absent parts."""
        parts = [type(self).__name__]
        if self.title is not None:
            parts.append(f"({self.title})")
        if self.error is not None:
            parts.append(f": {self.error}")
        if self.message is not None:
            parts.append(f"\n{self.message}")
        if self.stack_trace is not None:
            parts.append(f"\n{self.stack_trace}")
        return "".join(parts)

    __str__ = render

    def __repr__(self) -> str:
        return f"{type(self).__name__}(error={self.error!r}, title={self.title!r}, message={self.message!r})"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, ResultException):
            return NotImplemented
        return (self.error, self.title, self.message) == (other.error, other.title, other.message)

    def __hash__(self) -> int:
        return hash((self.error, self.title, self.message))


class MissingHandlerError(RuntimeError):
    """Raised by maybe_when() when no handler matches the Result's variant."""

    __slots__ = ("variant",)

    def __init__(self, variant: str) -> None:
        self.variant = variant
        super().__init__(f"No handler provided for {variant} state")


class UnwrapError(Exception):
    """Carrier raised by unwrap() when a Fail's error is not an exception.

    Python can only raise exceptions, so a plain error value (a string, a dict)
    travels in ``error`` untouched.
    """

    __slots__ = ("error",)

    def __init__(self, error: Any) -> None:
        self.error = error
        super().__init__(f"unwrap() on Fail: {error}")
