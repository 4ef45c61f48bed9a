"""Runtime helpers: sync/async bridging for combinators."""

from .interop import maybe_await, run_sync

__all__ = ["maybe_await", "run_sync"]
