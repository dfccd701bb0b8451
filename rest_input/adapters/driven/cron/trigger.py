"""Cron trigger adapter: APScheduler engine, croniter expressions."""

import asyncio
import logging
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.base import BaseTrigger
from croniter import croniter

from rest_input.core.errors import ConfigurationError
from rest_input.ports.trigger import TickFn, TriggerPort

__all__ = ["CronTrigger", "CrontabTrigger", "parse_schedule", "JOB_ID"]

logger = logging.getLogger(__name__)

JOB_ID = "rest_input_poll"

JOB_DEFAULTS = {
    "coalesce": True,  # Several missed fires run once
    "max_instances": 1,  # Single worker: a fire during a running tick is skipped
    "misfire_grace_time": 30,
}


def _as_zone(name: str) -> tzinfo | None:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None


def parse_schedule(expression: str) -> tuple[str, tzinfo | None]:
    """Split a schedule into cron fields and an optional timezone.

    Accepts 5 or 6 field cron lines (the 6th being seconds) and @-aliases
    such as "@hourly", optionally followed by an IANA timezone name,
    e.g. "0 6 * * * America/Chicago" or "@daily UTC".

    Args:
        expression: Schedule as configured.

    Returns:
        Tuple of (cron expression, timezone or None for local time).

    Raises:
        ConfigurationError: If the cron expression is malformed.
    """
    fields = expression.split()
    tz: tzinfo | None = None

    if len(fields) > 1:
        tz = _as_zone(fields[-1])
        if tz is not None:
            fields = fields[:-1]

    cron = " ".join(fields)
    try:
        croniter(cron)
    except (ValueError, KeyError) as e:
        raise ConfigurationError(f"Invalid cron expression '{expression}': {e}") from e
    return cron, tz


class CrontabTrigger(BaseTrigger):
    """APScheduler trigger firing on standard crontab semantics.

    Day-of-week 0 is Sunday, as in crontab(5); APScheduler's own
    CronTrigger counts from Monday.
    """

    def __init__(self, cron: str, timezone: tzinfo | None = None) -> None:
        self.cron = cron
        self.timezone = timezone

    def get_next_fire_time(
        self, previous_fire_time: datetime | None, now: datetime
    ) -> datetime:
        start = previous_fire_time or now
        if self.timezone is not None:
            start = start.astimezone(self.timezone)
        return croniter(self.cron, start).get_next(datetime)

    def __str__(self) -> str:
        return f"crontab[{self.cron}]"


class CronTrigger(TriggerPort):
    """Fire one callback on a cron schedule with a single worker.

    Ticks run on an AsyncIOScheduler job limited to one instance; a fire
    that lands while a tick is still running is skipped. Shutdown drains
    the in-flight tick before the scheduler is torn down.
    """

    def __init__(self) -> None:
        """Initialize trigger (scheduler created on register)."""
        self._scheduler: AsyncIOScheduler | None = None
        self._callback: TickFn | None = None
        self._idle = asyncio.Event()
        self._idle.set()
        self._stopped = asyncio.Event()

    def register(self, expression: str, callback: TickFn) -> None:
        """Validate expression and start the scheduler.

        Must be called from a running event loop.

        Args:
            expression: Cron expression, optionally with a timezone.
            callback: Async callable run on every tick.

        Raises:
            ConfigurationError: If the expression is malformed.
            RuntimeError: If a callback is already registered.
        """
        if self._callback is not None:
            raise RuntimeError("CronTrigger accepts a single registration")

        cron, tz = parse_schedule(expression)
        self._callback = callback

        options = {"event_loop": asyncio.get_running_loop(), "job_defaults": JOB_DEFAULTS}
        if tz is not None:
            options["timezone"] = tz
        scheduler = AsyncIOScheduler(**options)
        scheduler.add_job(self._run_tick, trigger=CrontabTrigger(cron, tz), id=JOB_ID)
        scheduler.start()
        self._scheduler = scheduler

        logger.debug(f"Cron trigger started on '{cron}' (next run: {self.next_run_time})")

    @property
    def next_run_time(self) -> datetime | None:
        """Next scheduled fire time, or None when not scheduled."""
        if self._scheduler is None:
            return None
        job = self._scheduler.get_job(JOB_ID)
        return job.next_run_time if job is not None else None

    async def join(self) -> None:
        """Block until the trigger has been shut down."""
        await self._stopped.wait()

    async def shutdown(self, wait: bool = True) -> None:
        """Stop scheduling new ticks.

        Args:
            wait: Wait for the in-flight tick (if any) to finish.
        """
        if self._stopped.is_set():
            return

        scheduler = self._scheduler
        if scheduler is not None and scheduler.running:
            scheduler.pause()
            if wait:
                await self._idle.wait()
            # Cancels the in-flight tick only when not waiting
            if scheduler.running:
                scheduler.shutdown(wait=False)

        self._stopped.set()
        logger.debug("Cron trigger stopped")

    async def _run_tick(self) -> None:
        """Job body executed by the scheduler."""
        if self._callback is None:
            raise RuntimeError("No callback registered")

        self._idle.clear()
        try:
            await self._callback()
        finally:
            self._idle.set()
