"""REST input: scheduler -> poller -> decorator -> sink."""

import logging
from collections.abc import Awaitable, Callable

from rest_input.core.decorator import Decorator
from rest_input.core.scheduler import Scheduler
from rest_input.ports.http import PollResult, RequestPort
from rest_input.ports.trigger import TriggerPort

__all__ = ["RestInput"]

logger = logging.getLogger(__name__)


class RestInput:
    """Poll one endpoint once or on a cron schedule and emit events."""

    def __init__(
        self,
        *,
        request: RequestPort,
        request_fn: Callable[[RequestPort], Awaitable[PollResult]],
        decorator: Decorator,
        schedule: str | None = None,
        trigger_factory: Callable[[], TriggerPort] | None = None,
    ) -> None:
        """Initialize the input.

        Args:
            request: Immutable request issued on every poll.
            request_fn: Async function executing one request.
            decorator: Turns a poll result into pushed events.
            schedule: Cron expression; None runs exactly once.
            trigger_factory: Builds the recurring trigger.
        """
        self.request = request
        self.request_fn = request_fn
        self.decorator = decorator
        self.scheduler = Scheduler(
            self.poll_once,
            schedule=schedule,
            trigger_factory=trigger_factory,
        )

    async def poll_once(self) -> int:
        """Execute one request and emit its events.

        Returns:
            Number of events pushed.

        Raises:
            TransportError: If no response was received.
        """
        result = await self.request_fn(self.request)
        logger.info(f"GET {self.request.url} returned status {result.status_code}")
        return self.decorator.decorate_and_emit(result, self.request)

    async def run(self) -> None:
        """See Scheduler.run."""
        await self.scheduler.run()

    async def stop(self) -> None:
        """See Scheduler.stop."""
        await self.scheduler.stop()
