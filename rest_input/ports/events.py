"""Event pipeline ports: codec, sink and decoration hook."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, Protocol

__all__ = ["Event", "CodecPort", "SinkPort", "DecorateFn"]

Event = dict[str, Any]

# Hook applied to every event before it is pushed; may mutate in place
# and return None, or return the (possibly new) event.
DecorateFn = Callable[[Event], Event | None]


class CodecPort(Protocol):
    """Turns a raw response body into record payloads."""

    def decode(self, data: bytes, /) -> Iterator[Event]:
        """Lazily yield payloads decoded from data.

        Args:
            data: Raw response body.

        Yields:
            Mapping-like records, zero or more per body.

        Raises:
            DecodeError: If the body is malformed.
        """
        ...


class SinkPort(Protocol):
    """Append-only destination for decorated events."""

    def push(self, event: Event, /) -> None:
        """Accept one event. Must not block indefinitely.

        Args:
            event: Decorated event; ownership passes to the sink.
        """
        ...
