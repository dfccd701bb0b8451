"""Structured logging setup for the REST input."""

import logging
import os
import sys

__all__ = ["configure_logs"]


def configure_logs(level: str | None = None) -> None:
    """Configure console logging on stderr.

    Events go to stdout, so logs are kept on stderr.

    Sets up:
    - Root logger at INFO level.
    - Framework loggers (aiohttp, asyncio) at WARNING level.
    - Application loggers (rest_input) at REST_LOG_LEVEL (default DEBUG).
    - Structured format with timestamp, level, module, and line number.

    Args:
        level: Application log level; overrides REST_LOG_LEVEL.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
    date_format = "%d/%m/%y %H:%M:%S"

    formatter = logging.Formatter(log_format, date_format)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    # Root logger
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(handler)

    # Suppress verbose framework loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    # Application loggers
    app_level = (level or os.getenv("REST_LOG_LEVEL") or "DEBUG").upper()
    logging.getLogger("rest_input").setLevel(app_level)
