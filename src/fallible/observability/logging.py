"""Structured log output for Results.

The Result core never logs. ``log_result`` is the single bridge: it writes a
Result as one structured entry and hands the same Result back, so it can sit
in the middle of a chain.

Quick Start:
    >>> from fallible.observability import configure_logging, get_logger, log_result
    >>>
    >>> configure_logging(format="json")
    >>> saved = log_result(save(order), get_logger("orders"), event="order saved")
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol, TextIO, TypeVar, runtime_checkable

import orjson

from ..monads.result import Fail, Success

if TYPE_CHECKING:
    from ..monads.result import Result

T = TypeVar("T")

JsonDict = dict[str, Any]

# Field carrying a Fail's stack trace; console output prints it below the entry.
_TRACE_FIELD = "stack_trace"


@dataclass(slots=True, frozen=True)
class LogEntry:
    """One structured entry: when, how severe, what happened, and its fields."""

    timestamp: float
    level: str
    event: str
    fields: JsonDict

    @property
    def when(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=UTC)


@runtime_checkable
class LogRenderer(Protocol):
    """Anything that can write a LogEntry somewhere."""

    def render(self, entry: LogEntry) -> None: ...


@dataclass(slots=True, frozen=True)
class BoundLogger:
    """Logger with fixed fields attached to every entry.

    Example:
        >>> log = get_logger("billing").bind(tenant="acme")
        >>> log.info("card charged", amount=42)
    """

    context: JsonDict = field(default_factory=dict)
    renderer: LogRenderer | None = None
    level: int = logging.DEBUG

    def bind(self, **fields: Any) -> BoundLogger:
        return replace(self, context={**self.context, **fields})

    def log(self, level: int, event: str, **fields: Any) -> None:
        if level < self.level:
            return
        entry = LogEntry(time.time(), logging.getLevelName(level).lower(), event, {**self.context, **fields})
        (self.renderer or _active_renderer()).render(entry)

    def debug(self, event: str, **fields: Any) -> None:
        self.log(logging.DEBUG, event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self.log(logging.INFO, event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self.log(logging.WARNING, event, **fields)

    def error(self, event: str, **fields: Any) -> None:
        self.log(logging.ERROR, event, **fields)


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class ConsoleRenderer:
    """Human-readable lines: ``12:30:01.042 [error] event key=value ...``.

    A stack trace field is printed verbatim on the lines that follow.
    Colors default to on when the output is a terminal.
    """

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool | None = None
    show_timestamp: bool = True

    def render(self, entry: LogEntry) -> None:
        colors = self.colors if self.colors is not None else getattr(self.output, "isatty", lambda: False)()
        paint = _paint if colors else _plain
        parts: list[str] = []
        if self.show_timestamp:
            parts.append(paint(_DIM, entry.when.strftime("%H:%M:%S.%f")[:-3]))
        parts.append(paint(_LEVEL_STYLES.get(entry.level, _DIM), f"[{entry.level}]"))
        parts.append(paint(_BOLD, entry.event))
        parts.extend(f"{key}={_console_value(value)}"
                     for key, value in sorted(entry.fields.items()) if key != _TRACE_FIELD)
        print(" ".join(parts), file=self.output)
        if (trace := entry.fields.get(_TRACE_FIELD)) is not None:
            print(paint(_RED, str(trace).rstrip("\n")), file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines for log aggregation. Values orjson cannot encode are written with str()."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        record = {"timestamp": entry.when.isoformat(), "level": entry.level, "event": entry.event, **entry.fields}
        self.output.write(orjson.dumps(
            record, default=str, option=orjson.OPT_NON_STR_KEYS | orjson.OPT_APPEND_NEWLINE,
        ).decode())


class NoOpRenderer:
    """Discards every entry."""

    __slots__ = ()

    def render(self, entry: LogEntry) -> None:
        pass


# ─────────────────────────────────────────────────────────────────────────────
# Global Configuration
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class _LogConfig:
    renderer: LogRenderer | None = None
    level: int = logging.INFO
    include_stack_trace: bool = True


_config: ContextVar[_LogConfig] = ContextVar("fallible_log_config", default=_LogConfig())


def configure_logging(
    format: str = "console",  # noqa: A002
    level: str = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
    include_stack_trace: bool = True,
) -> LogRenderer:
    """Set the renderer, default level and trace policy used by get_logger() and log_result().

    format is "console" (human), "json" (machine) or "none".
    """
    renderer: LogRenderer
    match format:
        case "console":
            renderer = ConsoleRenderer(output=output or sys.stderr, colors=colors)
        case "json":
            renderer = JsonRenderer(output=output or sys.stdout)
        case "none":
            renderer = NoOpRenderer()
        case _:
            raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")
    _config.set(_LogConfig(renderer, getattr(logging, level.upper(), logging.INFO), include_stack_trace))
    return renderer


def get_logger(name: str | None = None, **context: Any) -> BoundLogger:
    """Logger at the configured level; name is bound as the 'logger' field."""
    if name:
        context["logger"] = name
    return BoundLogger(context=context, level=_config.get().level)


def _active_renderer() -> LogRenderer:
    config = _config.get()
    if config.renderer is None:
        config = replace(config, renderer=ConsoleRenderer())
        _config.set(config)
    return config.renderer  # type: ignore[return-value]


# ─────────────────────────────────────────────────────────────────────────────
# Result Rendering
# ─────────────────────────────────────────────────────────────────────────────


def log_result(
    result: Result[T],
    log: BoundLogger | None = None,
    *,
    event: str | None = None,
    include_stack_trace: bool | None = None,
) -> Result[T]:
    """Log a Result and return it unchanged.

    Success is logged at info with its value; Fail at error with the error, its
    type and (unless disabled) the stack trace. Title and message are included
    when present.
    """
    log = log or get_logger("fallible")
    fields: JsonDict = {k: v for k, v in (("title", result.title), ("message", result.message)) if v is not None}
    match result:
        case Success(value):
            log.info(event or "operation succeeded", result=value, **fields)
        case Fail(error, stack_trace):
            if include_stack_trace is None:
                include_stack_trace = _config.get().include_stack_trace
            if include_stack_trace and stack_trace is not None:
                fields[_TRACE_FIELD] = str(stack_trace)
            log.error(event or "operation failed", error=str(error), error_type=type(error).__name__, **fields)
    return result


# ─────────────────────────────────────────────────────────────────────────────
# Console Formatting
# ─────────────────────────────────────────────────────────────────────────────


_RESET, _BOLD, _DIM, _RED = "\033[0m", "\033[1m", "\033[2m", "\033[31m"
_LEVEL_STYLES = {"debug": _DIM, "info": "\033[32m", "warning": "\033[33m", "error": _RED}


def _paint(style: str, text: str) -> str:
    return f"{style}{text}{_RESET}"


def _plain(style: str, text: str) -> str:
    return text


def _console_value(value: object) -> str:
    match value:
        case str():
            return f'"{value}"'
        case bool():
            return str(value).lower()
        case _:
            return repr(value)
