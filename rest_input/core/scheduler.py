"""Run/stop lifecycle: run once, or on a recurring cron trigger."""

import logging
from collections.abc import Awaitable, Callable

from rest_input.core.errors import TransportError
from rest_input.ports.trigger import TriggerPort

__all__ = ["Scheduler"]

logger = logging.getLogger(__name__)


class Scheduler:
    """Decide when the job runs.

    Without a schedule, run() executes the job exactly once and lets any
    failure propagate. With a schedule, run() registers the job on a trigger
    and blocks until stop() drains it; failures are contained per tick.
    """

    def __init__(
        self,
        job: Callable[[], Awaitable[object]],
        *,
        schedule: str | None = None,
        trigger_factory: Callable[[], TriggerPort] | None = None,
    ) -> None:
        """Initialize scheduler.

        Args:
            job: Async callable executed on every tick.
            schedule: Cron expression; None means run exactly once.
            trigger_factory: Builds the recurring trigger (required with schedule).

        Raises:
            ValueError: If a schedule is given without a trigger factory.
        """
        if schedule is not None and trigger_factory is None:
            raise ValueError("A trigger factory is required for scheduled runs")

        self.job = job
        self.schedule = schedule
        self.trigger_factory = trigger_factory
        self.handle: TriggerPort | None = None

    async def run(self) -> None:
        """Run the job once, or serve it on the schedule until stopped.

        Raises:
            ConfigurationError: If the cron expression is malformed.
            RuntimeError: If a recurring run is already active.
            Exception: Whatever the job raises, in run-once mode only.
        """
        if self.schedule is None:
            logger.info("No schedule configured, running once")
            await self.job()
            return

        if self.handle is not None:
            raise RuntimeError("Scheduler is already running")

        if self.trigger_factory is None:
            raise RuntimeError("A trigger factory is required for scheduled runs")
        handle = self.trigger_factory()
        handle.register(self.schedule, self._tick)
        self.handle = handle
        logger.info(f"Scheduled on '{self.schedule}'")

        try:
            await handle.join()
        finally:
            self.handle = None

    async def stop(self) -> None:
        """Stop scheduling and wait for the in-flight tick, if any.

        Safe to call before run(), in run-once mode, and more than once.
        """
        handle = self.handle
        if handle is None:
            logger.debug("Nothing to stop")
            return

        logger.info("Stopping scheduler, draining in-flight tick...")
        await handle.shutdown(wait=True)
        logger.info("Scheduler stopped.")

    async def _tick(self) -> None:
        """Run one job and keep any failure inside this tick."""
        try:
            await self.job()
        except TransportError as e:
            logger.warning(f"Endpoint unreachable: {e}")
        except Exception as e:  # noqa: BLE001
            logger.error(f"Unexpected error in scheduled tick: {e}", exc_info=True)
