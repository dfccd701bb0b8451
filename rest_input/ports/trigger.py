"""Recurring trigger port definition (interface)."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol

__all__ = ["TickFn", "TriggerPort"]

TickFn = Callable[[], Awaitable[None]]


class TriggerPort(Protocol):
    """Cron-like timer running one callback on a single worker."""

    def register(self, expression: str, callback: TickFn, /) -> None:
        """Register callback on a cron expression.

        Raises:
            ConfigurationError: If the expression is malformed.
        """
        ...

    async def join(self) -> None:
        """Block until the trigger has been shut down."""
        ...

    async def shutdown(self, wait: bool = True) -> None:
        """Stop firing new ticks; with wait, drain the in-flight tick."""
        ...
