"""Application entrypoint."""

import asyncio
import logging

from rest_input.adapters.driven.codec.json_codec import get_codec
from rest_input.adapters.driven.config.settings import load_settings
from rest_input.adapters.driven.cron.trigger import CronTrigger
from rest_input.adapters.driven.host import get_host_name
from rest_input.adapters.driven.http.client import HttpClient
from rest_input.adapters.driven.logging.logging_config import configure_logs
from rest_input.adapters.driven.pipeline.decoration import make_decorate
from rest_input.adapters.driven.sink.stdout import StdoutSink
from rest_input.adapters.driving.signals import make_stop_on_sigterm
from rest_input.core.decorator import Decorator
from rest_input.core.errors import ConfigurationError, TransportError
from rest_input.core.rest_input import RestInput
from rest_input.ports.events import SinkPort
from rest_input.ports.http import RequestPort
from rest_input.ports.settings import SettingsPort

__all__ = ["main", "build_input", "cli"]

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REQUEST_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_input(
    settings: SettingsPort,
    http: HttpClient,
    sink: SinkPort,
    host: str,
) -> RestInput:
    """Wire the REST input from settings and adapters.

    Args:
        settings: Runtime settings.
        http: Open HTTP client used as poller.
        sink: Destination for events.
        host: Host name resolved once at startup.

    Returns:
        Ready-to-run input.
    """
    decorator = Decorator(
        name=settings.name,
        host=host,
        codec=get_codec(settings.codec),
        sink=sink,
        decorate=make_decorate(settings.type, settings.tags, settings.add_field),
    )
    return RestInput(
        request=RequestPort(
            url=settings.url,
            headers=dict(settings.headers),
            timeout_sec=settings.timeout_sec,
        ),
        request_fn=http.get,
        decorator=decorator,
        schedule=settings.schedule,
        trigger_factory=CronTrigger,
    )


async def main() -> int:
    """Start the REST input service.

    Startup sequence:
    1. Configure logging.
    2. Load and validate configuration.
    3. Resolve the host name once.
    4. Run once, or serve the cron schedule.
    5. Gracefully drain on SIGTERM/SIGINT.

    Returns:
        Process exit code.
    """
    configure_logs()
    logger.info("Starting REST input...")

    try:
        config = load_settings()
    except ConfigurationError as exc:
        logger.error(
            "Configuration error: %s\n"
            "Hint: check REST_URL, REST_NAME, REST_TIMEOUT, REST_HEADERS "
            "and that REST_SCHEDULE is a valid cron expression.",
            exc,
        )
        return EXIT_CONFIG_ERROR

    # Wrap config into port so core depends on interface (hexagonal)
    settings_port = SettingsPort(
        url=config.url,
        name=config.name,
        headers=config.headers,
        timeout_sec=config.timeout_sec,
        schedule=config.schedule,
        codec=config.codec,
        type=config.type,
        tags=tuple(config.tags),
        add_field=config.add_field,
    )
    host = get_host_name()
    logger.info(f"Registering REST input '{settings_port.name}' on host {host}")

    async with HttpClient() as http:
        rest_input = build_input(settings_port, http, StdoutSink(), host)
        if settings_port.schedule is not None:
            make_stop_on_sigterm(rest_input.stop)

        try:
            await rest_input.run()
        except ConfigurationError as exc:
            logger.error(f"Configuration error: {exc}")
            return EXIT_CONFIG_ERROR
        except TransportError as exc:
            logger.error(f"Request failed: {exc}")
            return EXIT_REQUEST_FAILED

    logger.info("REST input stopped.")
    return EXIT_OK


def cli() -> None:
    """Console script entry point."""
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user (Ctrl+C).")


if __name__ == "__main__":
    cli()
