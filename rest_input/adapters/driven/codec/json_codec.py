"""JSON codecs turning response bodies into event payloads."""

import json
from collections.abc import Iterator
from typing import Any

from rest_input.core.errors import ConfigurationError, DecodeError
from rest_input.ports.events import CodecPort, Event

__all__ = ["JsonCodec", "JsonLinesCodec", "get_codec", "CODECS"]


def _to_event(value: Any) -> Event:
    """Wrap non-object values so every payload is a mapping."""
    if isinstance(value, dict):
        return value
    return {"message": value}


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}") from e


def _as_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Body is not valid UTF-8: {e}") from e


class JsonCodec(CodecPort):
    """Decode a body holding a single JSON document.

    - Empty body: no payload.
    - Object: one payload.
    - Array: one payload per element.
    - Anything else: one payload under "message".
    """

    def decode(self, data: bytes) -> Iterator[Event]:
        text = _as_text(data)
        if not text.strip():
            return

        document = _loads(text)
        if isinstance(document, list):
            for item in document:
                yield _to_event(item)
        else:
            yield _to_event(document)


class JsonLinesCodec(CodecPort):
    """Decode newline-delimited JSON, one payload per non-blank line."""

    def decode(self, data: bytes) -> Iterator[Event]:
        for line in _as_text(data).splitlines():
            if line.strip():
                yield _to_event(_loads(line))


CODECS: dict[str, type[CodecPort]] = {
    "json": JsonCodec,
    "json_lines": JsonLinesCodec,
}


def get_codec(name: str) -> CodecPort:
    """Instantiate a codec by name.

    Args:
        name: One of CODECS.

    Returns:
        Codec instance.

    Raises:
        ConfigurationError: If the codec is unknown.
    """
    try:
        return CODECS[name]()
    except KeyError as e:
        raise ConfigurationError(
            f"Unknown codec '{name}' (expected one of: {', '.join(CODECS)})"
        ) from e
