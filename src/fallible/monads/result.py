"""Result type for operations that either succeed with a value or fail with an error.

A closed two-variant sum type with context carried alongside the payload:
- Success: result value plus optional title/message
- Fail: untyped error plus optional stack trace, title and message

Combinator layer:
- Dispatch: when, maybe_when, when_success, when_fail, fold
- Functor: map_success, map_fail
- Monad: and_then (failure is absorbing)
- Recovery: recover, unwrap_or, unwrap_or_compute
- Inspection: cast, as_success, as_fail, swap, ensure
- Collections: traverse, sequence

Handler-taking combinators are coroutines. Handlers may be plain functions or
coroutine functions; both are awaited uniformly through ``maybe_await``.
"""

from __future__ import annotations

import inspect
import traceback
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    ClassVar,
    Generic,
    NoReturn,
    TypeVar,
    cast,
    get_origin,
)

from pydantic import ConfigDict, PydanticSchemaGenerationError, PydanticUserError, TypeAdapter, ValidationError

from ..errors import MissingHandlerError, ResultException, UnwrapError
from ..runtime.interop import maybe_await

if TYPE_CHECKING:
    from collections.abc import Awaitable, Iterable

T = TypeVar("T")  # Success type
U = TypeVar("U")  # Mapped success type
R = TypeVar("R")  # Handler return / cast target type

_VARIANTS = frozenset({"Success", "Fail"})

# Defaults used by ensure() when the caller supplies none
_VALIDATION_ERROR = "Validation failed"
_VALIDATION_TITLE = "Validation Error"
_VALIDATION_MESSAGE = "The success value did not meet the required condition"
_CAST_TITLE = "Type Cast Error"


# ═════════════════════════════════════════════════════════════════════════════
# Canonical Defaults
# ═════════════════════════════════════════════════════════════════════════════


class DefaultSuccess:
    """Singleton marker held by empty_success() results.

    Equal only to itself: never to True, "true", 1 or None.
    """

    __slots__ = ()
    _instance: ClassVar[DefaultSuccess | None] = None

    def __new__(cls) -> DefaultSuccess:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __str__(self) -> str:
        return "Operation succeeded"

    def __repr__(self) -> str:
        return "DefaultSuccess()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, DefaultSuccess)

    def __hash__(self) -> int:
        return hash(DefaultSuccess)

    def __reduce__(self) -> tuple[type[DefaultSuccess], tuple[()]]:
        return (DefaultSuccess, ())


DEFAULT_SUCCESS = DefaultSuccess()


def default_error() -> ResultException:
    """Error held by empty_fail() results. Renders as 'ResultException: Operation failed'."""
    return ResultException("Operation failed")


# ═════════════════════════════════════════════════════════════════════════════
# Result
# ═════════════════════════════════════════════════════════════════════════════


class Result(Generic[T]):
    """Outcome of a fallible operation: exactly one of Success or Fail.

    The hierarchy is closed. Declaring any other subclass raises TypeError.
    Instances are immutable; every combinator returns a new Result.

    Examples:
        >>> Result.success(42).result
        42
        >>> Result.fail("boom").error
        'boom'
        >>> str(Result.success(1, title="Count"))
        'Success(result: 1, title: Count, message: None)'

        Railway-oriented chaining (combinators are coroutines):
        >>> async def load(user_id: int) -> Result[str]:
        ...     return Result.success(f"user-{user_id}")
        >>> async def pipeline() -> Result[int]:
        ...     loaded = await Result.success(7).and_then(load)
        ...     return await loaded.map_success(len)

    Notes:
        - title and message are present-or-absent (None), never defaulted to ""
        - the error payload is untyped; strings, exceptions and custom objects all work
        - Fail equality ignores stack_trace
    """

    __slots__ = ("_title", "_message")

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__ or cls.__name__ not in _VARIANTS:
            raise TypeError(f"Result is closed over Success and Fail; cannot declare {cls.__qualname__}")

    def __setattr__(self, name: str, value: object) -> NoReturn:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> NoReturn:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # ─────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def success(result: T, title: str | None = None, message: str | None = None) -> Result[T]:
        """Create a Success holding result."""
        return Success(result, title=title, message=message)

    @staticmethod
    def fail(
        error: Any,
        stack_trace: Any = None,
        title: str | None = None,
        message: str | None = None,
    ) -> Result[Any]:
        """Create a Fail holding error.

        Raises:
            TypeError: If error is None
        """
        return Fail(error, stack_trace=stack_trace, title=title, message=message)

    @staticmethod
    def empty_success(title: str | None = None, message: str | None = None) -> Result[Any]:
        """Create a Success holding the canonical DEFAULT_SUCCESS marker."""
        return Success.empty(title=title, message=message)

    @staticmethod
    def empty_fail(title: str | None = None, message: str | None = None) -> Result[Any]:
        """Create a Fail holding the canonical 'Operation failed' ResultException."""
        return Fail.empty(title=title, message=message)

    # ─────────────────────────────────────────────────────────────────
    # Accessors
    # ─────────────────────────────────────────────────────────────────

    @property
    def is_success(self) -> bool:
        return isinstance(self, Success)

    @property
    def is_fail(self) -> bool:
        return isinstance(self, Fail)

    @property
    def result(self) -> T:
        """Success value.

        Raises:
            ResultException: On Fail, built from its error, title, message and stack trace
        """
        self.throw_when_fail()
        return cast(Success[T], self)._result

    @property
    def title(self) -> str | None:
        return self._title

    @property
    def message(self) -> str | None:
        return self._message

    @property
    def error(self) -> Any:
        """Fail's error, None on Success."""
        return self._error if isinstance(self, Fail) else None

    @property
    def as_success(self) -> Success[T] | None:
        return self if isinstance(self, Success) else None

    @property
    def as_fail(self) -> Fail[T] | None:
        return self if isinstance(self, Fail) else None

    def throw_when_fail(self) -> None:
        """Raise a ResultException built from this Fail; no-op on Success.

        Meant for host code that aborts on exceptions, such as transactions:

            >>> def commit(result: Result[int]) -> None:
            ...     result.throw_when_fail()  # aborts the transaction on Fail
        """
        if isinstance(self, Fail):
            exc = self.to_exception()
            if isinstance(self._error, BaseException):
                raise exc from self._error
            raise exc

    # ─────────────────────────────────────────────────────────────────
    # Pattern Matching
    # ─────────────────────────────────────────────────────────────────

    async def when(
        self,
        *,
        success: Callable[[Success[T]], R | Awaitable[R]],
        fail: Callable[[Fail[T]], R | Awaitable[R]],
    ) -> R:
        """Exhaustive dispatch: run exactly one handler and return its (awaited) value.

        Example:
            >>> async def describe(result: Result[int]) -> str:
            ...     return await result.when(
            ...         success=lambda s: f"got {s.result}",
            ...         fail=lambda f: f"failed with {f.error}",
            ...     )
        """
        match self:
            case Success():
                return await maybe_await(success(self))
            case Fail():
                return await maybe_await(fail(self))
        raise _unknown_variant(self)

    async def maybe_when(
        self,
        *,
        success: Callable[[Success[T]], R | Awaitable[R]] | None = None,
        fail: Callable[[Fail[T]], R | Awaitable[R]] | None = None,
    ) -> R:
        """Like when(), but handlers are optional.

        Raises:
            MissingHandlerError: If the handler for the current variant is absent
        """
        match self:
            case Success():
                if success is None:
                    raise MissingHandlerError("Success")
                return await maybe_await(success(self))
            case Fail():
                if fail is None:
                    raise MissingHandlerError("Fail")
                return await maybe_await(fail(self))
        raise _unknown_variant(self)

    async def when_success(self, handler: Callable[[Success[T]], R | Awaitable[R]]) -> R | None:
        """Run handler on Success, return None on Fail."""
        if isinstance(self, Success):
            return await maybe_await(handler(self))
        return None

    async def when_fail(self, handler: Callable[[Fail[T]], R | Awaitable[R]]) -> R | None:
        """Run handler on Fail, return None on Success."""
        if isinstance(self, Fail):
            return await maybe_await(handler(self))
        return None

    async def fold(
        self,
        *,
        on_success: Callable[[Success[T]], R | Awaitable[R]],
        on_fail: Callable[[Fail[T]], R | Awaitable[R]],
    ) -> R:
        """Same dispatch as when() with functional-style parameter names."""
        return await self.when(success=on_success, fail=on_fail)

    # ─────────────────────────────────────────────────────────────────
    # Functor / Monad Operations
    # ─────────────────────────────────────────────────────────────────

    async def map_success(self, transform: Callable[[T], U | Awaitable[U]]) -> Result[U]:
        """Transform the Success value, keeping title and message. Fail passes through.

        Type signature: Result[T] -> (T -> U) -> Result[U]
        """
        if isinstance(self, Success):
            value = await maybe_await(transform(self._result))
            return Success(value, title=self._title, message=self._message)
        return cast(Fail[T], self).propagate()

    async def map_fail(self, transform: Callable[[Any], Any]) -> Result[T]:
        """Transform the Fail error, keeping stack trace, title and message. Success passes through."""
        if isinstance(self, Fail):
            error = await maybe_await(transform(self._error))
            return Fail(error, stack_trace=self._stack_trace, title=self._title, message=self._message)
        return cast(Success[T], self).copy_with()

    async def and_then(self, operation: Callable[[T], Result[U] | Awaitable[Result[U]]]) -> Result[U]:
        """Monadic bind: chain a fallible step. On Fail, operation is never called.

        Type signature: Result[T] -> (T -> Result[U]) -> Result[U]

        Raises:
            TypeError: If operation does not return a Result
        """
        if isinstance(self, Success):
            chained = await maybe_await(operation(self._result))
            if not isinstance(chained, Result):
                raise TypeError(f"and_then() operation must return a Result, got {type(chained).__name__}")
            return chained
        return cast(Fail[T], self).propagate()

    async def recover(self, transform: Callable[[Any], T | Awaitable[T]]) -> Result[T]:
        """Turn a Fail into a Success from its error, keeping title and message. Success passes through."""
        if isinstance(self, Fail):
            value = await maybe_await(transform(self._error))
            return Success(value, title=self._title, message=self._message)
        return cast(Success[T], self).copy_with()

    # ─────────────────────────────────────────────────────────────────
    # Value Extraction
    # ─────────────────────────────────────────────────────────────────

    def unwrap(self) -> T:
        """Return the Success value or raise the raw error.

        Unlike the ``result`` accessor the error is not wrapped: an exception
        error is raised as-is. Non-exception errors are carried by UnwrapError.

        Raises:
            BaseException: The Fail's error, when it is an exception
            UnwrapError: When the Fail's error is not an exception
        """
        if isinstance(self, Success):
            return self._result
        error = cast(Fail[T], self)._error
        if isinstance(error, BaseException):
            raise error
        raise UnwrapError(error)

    def unwrap_or(self, default: T) -> T:
        """Return the Success value or default."""
        return self._result if isinstance(self, Success) else default

    async def unwrap_or_compute(self, supplier: Callable[[], T | Awaitable[T]]) -> T:
        """Return the Success value, or call supplier (only on Fail)."""
        if isinstance(self, Success):
            return self._result
        return await maybe_await(supplier())

    # ─────────────────────────────────────────────────────────────────
    # Inspection & Conversion
    # ─────────────────────────────────────────────────────────────────

    def cast(self, target: type[R] | Any) -> Result[R]:
        """Reinterpret the Success value as target.

        Plain classes and unions are checked with isinstance; typing constructs
        isinstance cannot check (list[int], Literal, Any) go through strict
        pydantic validation. A mismatch becomes a Fail titled "Type Cast Error"
        holding a TypeError. A Fail is propagated without attempting the cast.

        Example:
            >>> Result.success(42).cast(int).result
            42
            >>> Result.success(42).cast(str).title
            'Type Cast Error'
        """
        if isinstance(self, Fail):
            return self.propagate()
        success = cast(Success[T], self)
        try:
            value = _coerce(success._result, target)
        except TypeError:
            message = f"Could not cast {type(success._result).__name__} to {_type_name(target)}"
            return Fail(
                TypeError(message),
                stack_trace=traceback.format_exc(),
                title=_CAST_TITLE,
                message=message,
            )
        return Success(value, title=success._title, message=success._message)

    def swap(self, as_type: type[T] | Any = None) -> Result[T]:
        """Invert the variant, keeping title and message.

        Success(v) becomes Fail(v), or the default error when v is None.
        Fail(e) becomes Success(e), or DEFAULT_SUCCESS when as_type is given and
        e is not compatible with it. Never raises.
        """
        if isinstance(self, Success):
            error = self._result if self._result is not None else default_error()
            return Fail(error, title=self._title, message=self._message)
        fail = cast(Fail[T], self)
        value: Any = fail._error
        if as_type is not None:
            try:
                value = _coerce(value, as_type)
            except TypeError:
                value = DEFAULT_SUCCESS
        return Success(value, title=fail._title, message=fail._message)

    def ensure(
        self,
        predicate: Callable[[T], bool],
        error: Any = None,
        title: str | None = None,
        message: str | None = None,
    ) -> Result[T]:
        """Turn a Success into a Fail when predicate(result) is false.

        Missing overrides default to ValueError("Validation failed"),
        "Validation Error" and a descriptive message. A Fail passes through
        and predicate is not called.

        Example:
            >>> Result.success(-1).ensure(lambda v: v > 0).title
            'Validation Error'
        """
        if isinstance(self, Fail):
            return self
        passed = predicate(cast(Success[T], self)._result)
        if inspect.isawaitable(passed):
            if inspect.iscoroutine(passed):
                passed.close()
            raise TypeError("ensure() predicate must be synchronous; got an awaitable")
        if not passed:
            return Fail(
                error if error is not None else ValueError(_VALIDATION_ERROR),
                title=title if title is not None else _VALIDATION_TITLE,
                message=message if message is not None else _VALIDATION_MESSAGE,
            )
        return self

    # ─────────────────────────────────────────────────────────────────
    # Collection Operations
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def traverse(
        items: Iterable[T],
        operation: Callable[[T], Result[U] | Awaitable[Result[U]]],
    ) -> Result[list[U]]:
        """See module-level traverse()."""
        return await traverse(items, operation)

    @staticmethod
    def sequence(results: Iterable[Result[T]]) -> Result[list[T]]:
        """See module-level sequence()."""
        return sequence(results)


class Success(Result[T]):
    """Successful outcome holding ``result`` plus optional title and message.

    Example:
        >>> match Result.success(3, title="Count"):
        ...     case Success(value, title):
        ...         print(value, title)
        3 Count
    """

    __slots__ = ("_result",)
    __match_args__ = ("result", "title", "message")

    def __init__(self, result: T, title: str | None = None, message: str | None = None) -> None:
        object.__setattr__(self, "_result", result)
        object.__setattr__(self, "_title", title)
        object.__setattr__(self, "_message", message)

    @classmethod
    def empty(cls, title: str | None = None, message: str | None = None) -> Success[Any]:
        """Success holding DEFAULT_SUCCESS."""
        return cls(DEFAULT_SUCCESS, title=title, message=message)

    @property
    def result(self) -> T:
        return self._result

    def copy_with(
        self,
        result: T | None = None,
        title: str | None = None,
        message: str | None = None,
        *,
        clear_title: bool = False,
        clear_message: bool = False,
    ) -> Success[T]:
        """Return a copy with fields replaced. None keeps the current value; clear_* drops it."""
        return Success(
            self._result if result is None else result,
            title=None if clear_title else (self._title if title is None else title),
            message=None if clear_message else (self._message if message is None else message),
        )

    def __str__(self) -> str:
        return f"Success(result: {self._result}, title: {self._title}, message: {self._message})"

    __repr__ = __str__

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Result):
            return NotImplemented
        return isinstance(other, Success) and (self._result, self._title, self._message) == (
            other._result, other._title, other._message,
        )

    def __hash__(self) -> int:
        return hash((Success, self._result, self._title, self._message))

    def __reduce__(self) -> tuple[type[Success[T]], tuple[Any, ...]]:
        return (Success, (self._result, self._title, self._message))


class Fail(Result[T]):
    """Failed outcome holding an untyped ``error`` plus optional stack trace, title and message.

    The stack trace is whatever the caller captured at failure time (a traceback
    object, a formatted string); it is never synthesized here.
    """

    __slots__ = ("_error", "_stack_trace")
    __match_args__ = ("error", "stack_trace", "title", "message")

    def __init__(
        self,
        error: Any,
        stack_trace: Any = None,
        title: str | None = None,
        message: str | None = None,
    ) -> None:
        if error is None:
            raise TypeError("Fail requires an error; use Fail.empty() for the default error")
        object.__setattr__(self, "_error", error)
        object.__setattr__(self, "_stack_trace", stack_trace)
        object.__setattr__(self, "_title", title)
        object.__setattr__(self, "_message", message)

    @classmethod
    def empty(cls, title: str | None = None, message: str | None = None) -> Fail[Any]:
        """Fail holding the default 'Operation failed' ResultException."""
        return cls(default_error(), title=title, message=message)

    @property
    def error(self) -> Any:
        return self._error

    @property
    def stack_trace(self) -> Any:
        return self._stack_trace

    def to_exception(self) -> ResultException:
        """Build the ResultException payload for this Fail."""
        return ResultException(
            self._error,
            title=self._title,
            message=self._message,
            stack_trace=self._stack_trace,
        )

    def propagate(self) -> Fail[Any]:
        """Equivalent Fail for any target type, carrying every field over."""
        return Fail(self._error, stack_trace=self._stack_trace, title=self._title, message=self._message)

    def copy_with(
        self,
        error: Any = None,
        stack_trace: Any = None,
        title: str | None = None,
        message: str | None = None,
        *,
        clear_stack_trace: bool = False,
        clear_title: bool = False,
        clear_message: bool = False,
    ) -> Fail[T]:
        """Return a copy with fields replaced. None keeps the current value; clear_* drops it."""
        return Fail(
            self._error if error is None else error,
            stack_trace=None if clear_stack_trace else (self._stack_trace if stack_trace is None else stack_trace),
            title=None if clear_title else (self._title if title is None else title),
            message=None if clear_message else (self._message if message is None else message),
        )

    def __str__(self) -> str:
        return f"Fail(error: {self._error}, title: {self._title}, message: {self._message})"

    __repr__ = __str__

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Result):
            return NotImplemented
        return isinstance(other, Fail) and (self._error, self._title, self._message) == (
            other._error, other._title, other._message,
        )

    def __hash__(self) -> int:
        return hash((Fail, self._error, self._title, self._message))

    def __reduce__(self) -> tuple[type[Fail[T]], tuple[Any, ...]]:
        return (Fail, (self._error, self._stack_trace, self._title, self._message))


# ═════════════════════════════════════════════════════════════════════════════
# Constructor Functions
# ═════════════════════════════════════════════════════════════════════════════


def success(result: T, title: str | None = None, message: str | None = None) -> Result[T]:
    """Construct a Success."""
    return Success(result, title=title, message=message)


def fail(
    error: Any,
    stack_trace: Any = None,
    title: str | None = None,
    message: str | None = None,
) -> Result[Any]:
    """Construct a Fail. error must not be None."""
    return Fail(error, stack_trace=stack_trace, title=title, message=message)


def empty_success(title: str | None = None, message: str | None = None) -> Result[Any]:
    return Success.empty(title=title, message=message)


def empty_fail(title: str | None = None, message: str | None = None) -> Result[Any]:
    return Fail.empty(title=title, message=message)


def attempt(
    fn: Callable[..., T],
    *args: Any,
    title: str | None = None,
    message: str | None = None,
    **kwargs: Any,
) -> Result[T]:
    """Call fn, turning a raised Exception into a Fail with its formatted traceback.

    title and message are attached to the Fail only.

    Example:
        >>> attempt(int, "42").result
        42
        >>> attempt(int, "x", title="Parse").title
        'Parse'
    """
    try:
        return Success(fn(*args, **kwargs))
    except Exception as e:
        return Fail(e, stack_trace=traceback.format_exc(), title=title, message=message)


async def attempt_async(
    fn: Callable[..., T | Awaitable[T]],
    *args: Any,
    title: str | None = None,
    message: str | None = None,
    **kwargs: Any,
) -> Result[T]:
    """Async version of attempt(); fn may be sync or async."""
    try:
        return Success(await maybe_await(fn(*args, **kwargs)))
    except Exception as e:
        return Fail(e, stack_trace=traceback.format_exc(), title=title, message=message)


# ═════════════════════════════════════════════════════════════════════════════
# Collection Operations
# ═════════════════════════════════════════════════════════════════════════════


def sequence(results: Iterable[Result[T]]) -> Result[list[T]]:
    """Convert Results to a Result of list, failing fast on the first Fail.

    Type signature: [Result[T]] -> Result[[T]]

    Example:
        >>> sequence([success(1), success(2)]).result
        [1, 2]
        >>> sequence([success(1), fail("x"), success(3)]).error
        'x'
    """
    values: list[T] = []
    for result in results:
        if not isinstance(result, Result):
            raise TypeError(f"sequence() element must be a Result, got {type(result).__name__}")
        if isinstance(result, Fail):
            return result.propagate()
        values.append(cast(Success[T], result)._result)
    return Success(values)


async def traverse(
    items: Iterable[T],
    operation: Callable[[T], Result[U] | Awaitable[Result[U]]],
) -> Result[list[U]]:
    """Apply a fallible operation to each item in order, stopping at the first Fail.

    Items are processed strictly one after another; later items are never
    touched once a step fails. The failing step's stack trace is kept.

    Type signature: [T] -> (T -> Result[U]) -> Result[[U]]
    """
    values: list[U] = []
    for item in items:
        result = await maybe_await(operation(item))
        if not isinstance(result, Result):
            raise TypeError(f"traverse() operation must return a Result, got {type(result).__name__}")
        if isinstance(result, Fail):
            return result.propagate()
        values.append(cast(Success[U], result)._result)
    return Success(values)


# ═════════════════════════════════════════════════════════════════════════════
# Helpers
# ═════════════════════════════════════════════════════════════════════════════


def _coerce(value: Any, target: Any) -> Any:
    """Return value viewed as target, raising TypeError when incompatible."""
    try:
        matches = isinstance(value, target)
    except TypeError:
        try:
            _adapter(target).validate_python(value, strict=True)
        except (ValidationError, PydanticUserError) as e:
            raise TypeError(str(e)) from e
        return value
    if not matches:
        raise TypeError(f"{type(value).__name__} is not an instance of {_type_name(target)}")
    return value


def _adapter(target: Any) -> TypeAdapter[Any]:
    """Strict adapter for target; plain classes nested in generics are checked with isinstance."""
    try:
        return TypeAdapter(target, config=ConfigDict(arbitrary_types_allowed=True))
    except PydanticSchemaGenerationError:
        raise
    except PydanticUserError:
        # Models, dataclasses and TypedDicts carry their own config.
        return TypeAdapter(target)


def _type_name(target: Any) -> str:
    if get_origin(target) is None and hasattr(target, "__name__"):
        return target.__name__
    return repr(target)


def _unknown_variant(result: object) -> TypeError:
    return TypeError(f"Unknown Result variant: {type(result).__name__}")
