"""Settings port definition (DTO)."""

from dataclasses import dataclass, field
from typing import Any

from rest_input.ports.http import DEFAULT_TIMEOUT_SEC

__all__ = ["SettingsPort"]


@dataclass(frozen=True)
class SettingsPort:
    """Runtime settings for the REST input.

    Decouples core from concrete configuration sources, enabling
    easy testing and implementation swapping.

    Attributes:
        url: Endpoint polled on every execution.
        name: Symbolic name stamped on every event as meta_name.
        headers: Static HTTP headers.
        timeout_sec: Request timeout in seconds.
        schedule: Cron expression; None runs the request exactly once.
        codec: Name of the codec used to decode response bodies.
        type: Optional event type added by the decoration hook.
        tags: Tags appended to every event.
        add_field: Extra fields set on every event.
    """

    url: str
    name: str
    headers: dict[str, str] = field(default_factory=dict)
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    schedule: str | None = None
    codec: str = "json"
    type: str | None = None
    tags: tuple[str, ...] = ()
    add_field: dict[str, Any] = field(default_factory=dict)
