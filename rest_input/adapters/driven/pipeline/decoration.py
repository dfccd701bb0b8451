"""Pipeline decoration hook applied to every event before push."""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from rest_input.ports.events import DecorateFn, Event

__all__ = ["make_decorate", "TIMESTAMP_FIELD"]

TIMESTAMP_FIELD = "@timestamp"


def make_decorate(
    type_: str | None = None,
    tags: Iterable[str] = (),
    add_field: Mapping[str, Any] | None = None,
) -> DecorateFn:
    """Build the decoration hook.

    The hook never overwrites fields already present on the event, except
    "tags" which is extended.

    Args:
        type_: Value for the "type" field.
        tags: Tags appended to the "tags" list.
        add_field: Extra fields to set.

    Returns:
        In-place decoration function.
    """
    tags = tuple(tags)
    extra = dict(add_field or {})

    def decorate(event: Event) -> Event:
        event.setdefault(TIMESTAMP_FIELD, datetime.now(timezone.utc).isoformat())

        if type_ is not None:
            event.setdefault("type", type_)

        if tags:
            current = event.get("tags")
            if current is None:
                current = []
            elif not isinstance(current, list):
                current = [current]
            event["tags"] = current + [t for t in tags if t not in current]

        for key, value in extra.items():
            event.setdefault(key, value)

        return event

    return decorate
