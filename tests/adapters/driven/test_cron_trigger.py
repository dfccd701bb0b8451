"""Tests for the cron trigger adapter."""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch
from zoneinfo import ZoneInfo

import pytest

from rest_input.adapters.driven.cron.trigger import (
    JOB_ID,
    CronTrigger,
    CrontabTrigger,
    parse_schedule,
)
from rest_input.core.errors import ConfigurationError

__all__ = []

UTC = ZoneInfo("UTC")
NOON_AND_30S = datetime(2024, 1, 1, 12, 0, 30, tzinfo=timezone.utc)


def fire_soon(previous_fire_time: datetime | None, now: datetime) -> datetime:
    """Fire the cron job 10ms from now instead of on the next minute."""
    return now + timedelta(milliseconds=10)


def test_parse_schedule_without_timezone() -> None:
    """A plain 5-field expression should use local time."""
    assert parse_schedule("0 * * * *") == ("0 * * * *", None)


def test_parse_schedule_with_timezone() -> None:
    """A trailing IANA name should be split off as timezone."""
    cron, tz = parse_schedule("0 6 * * * America/Chicago")

    assert cron == "0 6 * * *"
    assert tz == ZoneInfo("America/Chicago")


@pytest.mark.parametrize("expression", ["@hourly", "@daily"])
def test_parse_schedule_alias(expression: str) -> None:
    """@-aliases should be accepted as is."""
    assert parse_schedule(expression) == (expression, None)


def test_parse_schedule_alias_with_timezone() -> None:
    """A timezone should also be split off an @-alias."""
    assert parse_schedule("@hourly UTC") == ("@hourly", UTC)


@pytest.mark.parametrize("expression", ["* * * * * */10", "0 0 * * MON"])
def test_parse_schedule_keeps_cron_fields(expression: str) -> None:
    """Seconds and day-name fields should not be mistaken for a timezone."""
    assert parse_schedule(expression) == (expression, None)


@pytest.mark.parametrize("expression", ["not a cron", "61 * * * *", "* * *"])
def test_parse_schedule_rejects_malformed(expression: str) -> None:
    """Malformed expressions should raise ConfigurationError."""
    with pytest.raises(ConfigurationError, match="Invalid cron expression"):
        parse_schedule(expression)


def test_crontab_trigger_next_minute() -> None:
    """The first fire time should be the next matching minute."""
    trigger = CrontabTrigger("* * * * *", UTC)

    assert trigger.get_next_fire_time(None, NOON_AND_30S) == datetime(
        2024, 1, 1, 12, 1, tzinfo=timezone.utc
    )


def test_crontab_trigger_follows_previous_fire_time() -> None:
    """Later fire times should be computed from the previous one."""
    trigger = CrontabTrigger("* * * * *", UTC)
    previous = datetime(2024, 1, 1, 12, 1, tzinfo=timezone.utc)

    assert trigger.get_next_fire_time(previous, NOON_AND_30S) == datetime(
        2024, 1, 1, 12, 2, tzinfo=timezone.utc
    )


def test_crontab_trigger_sunday_is_zero() -> None:
    """Day-of-week 0 should be Sunday, as in crontab."""
    trigger = CrontabTrigger("0 0 * * 0", UTC)
    wednesday = datetime(2024, 1, 3, 9, 0, tzinfo=timezone.utc)

    assert trigger.get_next_fire_time(None, wednesday) == datetime(
        2024, 1, 7, 0, 0, tzinfo=timezone.utc
    )


def test_crontab_trigger_uses_its_timezone() -> None:
    """Fire times should be computed in the configured timezone."""
    trigger = CrontabTrigger("0 6 * * *", ZoneInfo("America/Chicago"))
    midnight_utc = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)

    assert trigger.get_next_fire_time(None, midnight_utc) == datetime(
        2024, 1, 1, 12, 0, tzinfo=timezone.utc
    )


@pytest.mark.asyncio
async def test_register_starts_scheduler() -> None:
    """register() should schedule the job with a next run time."""
    trigger = CronTrigger()
    trigger.register("* * * * *", AsyncMock())

    assert trigger.next_run_time is not None
    assert trigger._scheduler.get_job(JOB_ID).max_instances == 1

    await trigger.shutdown()

    assert not trigger._scheduler.running


@pytest.mark.asyncio
async def test_register_rejects_malformed_expression() -> None:
    """register() should fail fast and start no scheduler."""
    trigger = CronTrigger()

    with pytest.raises(ConfigurationError):
        trigger.register("99 * * * *", AsyncMock())

    assert trigger._scheduler is None
    assert trigger.next_run_time is None


@pytest.mark.asyncio
async def test_register_twice_is_rejected() -> None:
    """A trigger should hold a single registration."""
    trigger = CronTrigger()
    trigger.register("* * * * *", AsyncMock())

    with pytest.raises(RuntimeError, match="single registration"):
        trigger.register("* * * * *", AsyncMock())

    await trigger.shutdown()


@pytest.mark.asyncio
async def test_shutdown_ends_join() -> None:
    """join() should return once shutdown() has been called."""
    callback = AsyncMock()
    trigger = CronTrigger()
    trigger.register("* * * * *", callback)

    join_task = asyncio.create_task(trigger.join())
    await asyncio.sleep(0.01)
    await trigger.shutdown(wait=True)
    await asyncio.wait_for(join_task, timeout=1)

    callback.assert_not_called()


@pytest.mark.asyncio
async def test_shutdown_is_idempotent_and_safe_before_register() -> None:
    """shutdown() should never fail, even unregistered or repeated."""
    trigger = CronTrigger()

    await trigger.shutdown()
    await trigger.shutdown(wait=False)
    await asyncio.wait_for(trigger.join(), timeout=1)


@pytest.mark.asyncio
async def test_concurrent_shutdowns_both_return() -> None:
    """Two shutdowns racing during a tick should both complete."""
    started = asyncio.Event()

    async def callback() -> None:
        started.set()
        await asyncio.sleep(0.03)

    trigger = CronTrigger()
    with patch.object(CrontabTrigger, "get_next_fire_time", side_effect=fire_soon):
        trigger.register("* * * * *", callback)
        await asyncio.wait_for(started.wait(), timeout=1)

        await asyncio.wait_for(asyncio.gather(trigger.shutdown(), trigger.shutdown()), timeout=1)

    assert not trigger._scheduler.running


@pytest.mark.asyncio
async def test_shutdown_waits_for_running_tick() -> None:
    """shutdown() should let the in-flight tick finish instead of cancelling it."""
    started = asyncio.Event()
    finished: list[bool] = []

    async def callback() -> None:
        started.set()
        await asyncio.sleep(0.05)
        finished.append(True)

    trigger = CronTrigger()
    with patch.object(CrontabTrigger, "get_next_fire_time", side_effect=fire_soon):
        trigger.register("* * * * *", callback)
        await asyncio.wait_for(started.wait(), timeout=1)

        await trigger.shutdown(wait=True)

    assert finished == [True]


@pytest.mark.asyncio
async def test_ticks_fire_callback() -> None:
    """Each elapsed tick should await the callback."""
    trigger = CronTrigger()
    calls: list[int] = []
    tasks: set[asyncio.Task[None]] = set()

    async def callback() -> None:
        calls.append(len(calls))
        if len(calls) == 2:
            tasks.add(asyncio.get_running_loop().create_task(trigger.shutdown()))

    with patch.object(CrontabTrigger, "get_next_fire_time", side_effect=fire_soon):
        trigger.register("* * * * *", callback)
        await asyncio.wait_for(trigger.join(), timeout=1)

    assert calls == [0, 1]
