"""Signal handling for graceful shutdown."""

import asyncio
import logging
import signal
from collections.abc import Awaitable, Callable

__all__ = ["make_stop_on_sigterm"]

logger = logging.getLogger(__name__)


def make_stop_on_sigterm(on_stop: Callable[[], Awaitable[None]]) -> Callable[[], bool]:
    """Run on_stop once when SIGTERM or SIGINT is received.

    Registers handlers on the running loop that schedule on_stop (e.g. a
    draining scheduler stop) as a task. Repeated signals are ignored.

    On Docker/Kubernetes, SIGTERM is sent 30s before SIGKILL,
    allowing the in-flight request to drain.

    Args:
        on_stop: Async callable requesting graceful shutdown.

    Returns:
        Callable that returns True once a termination signal was received.
    """
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    tasks: set[asyncio.Task[None]] = set()

    async def _stop() -> None:
        await on_stop()

    def handle_signal() -> None:
        """Signal handler that triggers the stop callback once."""
        if stop.is_set():
            return
        logger.info("Termination signal received, initiating graceful shutdown...")
        stop.set()
        task = loop.create_task(_stop())
        tasks.add(task)
        task.add_done_callback(tasks.discard)

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, handle_signal)

    return stop.is_set
