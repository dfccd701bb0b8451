"""Configuration loading from environment variables."""

import json
import logging
import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

from rest_input.adapters.driven.codec.json_codec import CODECS
from rest_input.adapters.driven.cron.trigger import parse_schedule
from rest_input.core.errors import ConfigurationError
from rest_input.ports.http import DEFAULT_TIMEOUT_SEC

__all__ = ["Settings", "load_settings"]

load_dotenv()

logger = logging.getLogger(__name__)
_http_url_adapter = TypeAdapter(HttpUrl)


class Settings(BaseModel):
    """Runtime configuration for the REST input.

    Attributes:
        url: HTTP(S) endpoint polled on every execution.
        name: Symbolic name stamped on every event.
        headers: Static HTTP headers sent with every request.
        timeout_sec: Request timeout in seconds (must be positive).
        schedule: Optional cron expression; absent means run once.
        codec: Codec used to decode response bodies.
        type: Optional "type" field added to every event.
        tags: Tags appended to every event.
        add_field: Extra fields added to every event.
    """

    url: str = Field(..., description="HTTP endpoint to poll.")
    name: str = Field(..., min_length=1, description="Name stamped as meta_name.")
    headers: dict[str, str] = Field(default_factory=dict, description="Static HTTP headers.")
    timeout_sec: float = Field(
        default=DEFAULT_TIMEOUT_SEC,
        gt=0,
        allow_inf_nan=False,
        description="Request timeout in seconds.",
    )
    schedule: str | None = Field(
        default=None,
        description="Cron expression. If not set, the request runs exactly once.",
    )
    codec: str = Field(default="json", description="Response body codec.")
    type: str | None = Field(default=None, description="Event type.")
    tags: list[str] = Field(default_factory=list, description="Event tags.")
    add_field: dict[str, Any] = Field(default_factory=dict, description="Extra event fields.")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate that url is a valid HTTP(S) URL.

        Args:
            v: URL to validate.

        Returns:
            The validated URL.

        Raises:
            ValueError: If URL is invalid or not http(s).
        """
        try:
            url = _http_url_adapter.validate_python(v)
            if url.scheme not in ("http", "https"):
                raise ValueError("Only http:// and https:// endpoints allowed")
        except Exception as e:
            raise ValueError(f"Invalid URL: {e}") from e
        return v

    @field_validator("schedule")
    @classmethod
    def validate_schedule(cls, v: str | None) -> str | None:
        """Validate the cron expression (if provided).

        Args:
            v: Cron expression (can be None).

        Returns:
            The stripped expression, or None when blank.

        Raises:
            ValueError: If the expression is malformed.
        """
        if v is None or not v.strip():
            return None
        parse_schedule(v)
        return v.strip()

    @field_validator("codec")
    @classmethod
    def validate_codec(cls, v: str) -> str:
        """Validate that the codec is known."""
        if v not in CODECS:
            raise ValueError(f"Unknown codec '{v}' (expected one of: {', '.join(CODECS)})")
        return v


def _json_object_env(var: str) -> dict[str, Any]:
    """Read an optional environment variable holding a JSON object."""
    raw = os.getenv(var)
    if raw is None or not raw.strip():
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{var} must contain valid JSON (got: {raw})") from e
    if not isinstance(value, dict):
        raise ConfigurationError(f"{var} must be a JSON object (got: {raw})")
    return value


def load_settings() -> Settings:
    """Load and validate settings from environment.

    Required environment variables:
    - REST_URL: HTTP(S) endpoint to poll.
    - REST_NAME: Name stamped on every event.

    Optional:
    - REST_HEADERS: JSON object of HTTP headers.
    - REST_TIMEOUT: Request timeout in seconds (default 60).
    - REST_SCHEDULE: Cron expression; absent means run once.
    - REST_CODEC: "json" (default) or "json_lines".
    - REST_TYPE, REST_TAGS (comma separated), REST_ADD_FIELD (JSON object).

    Returns:
        Validated Settings object.

    Raises:
        ConfigurationError: If a variable is missing or invalid.
    """
    try:
        url = os.environ["REST_URL"]
        name = os.environ["REST_NAME"]
    except KeyError as e:
        raise ConfigurationError(f"Missing required environment variable: {e.args[0]}") from e

    options: dict[str, Any] = {
        "url": url,
        "name": name,
        "headers": _json_object_env("REST_HEADERS"),
        "add_field": _json_object_env("REST_ADD_FIELD"),
        "schedule": os.getenv("REST_SCHEDULE"),
        "type": os.getenv("REST_TYPE") or None,
        "tags": [t.strip() for t in os.getenv("REST_TAGS", "").split(",") if t.strip()],
    }
    if timeout_raw := os.getenv("REST_TIMEOUT"):
        options["timeout_sec"] = timeout_raw
    if codec := os.getenv("REST_CODEC"):
        options["codec"] = codec

    try:
        settings = Settings(**options)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    logger.info(
        f"REST input configured: name={settings.name}, url={settings.url}, "
        f"timeout={settings.timeout_sec}s, codec={settings.codec}, "
        f"schedule={settings.schedule or '<run once>'}"
    )

    return settings
