"""Healthcheck validator for container orchestration."""

import logging

from rest_input.adapters.driven.config.settings import load_settings
from rest_input.adapters.driven.logging.logging_config import configure_logs

__all__ = ["main"]

logger = logging.getLogger(__name__)


def main() -> int:
    """Run health check for container orchestration.

    Validates:
    - Required environment variables are set.
    - URL, timeout, headers and cron schedule are valid.

    Returns:
        0 if healthy, 1 if unhealthy.
    """
    configure_logs()

    try:
        _ = load_settings()
    except Exception as exc:
        logger.error(f"REST input healthcheck FAILED: {exc}")
        return 1

    logger.info("REST input healthcheck OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
