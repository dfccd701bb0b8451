"""Sink writing events as JSON lines."""

import json
import sys
from typing import TextIO

from rest_input.ports.events import Event, SinkPort

__all__ = ["StdoutSink"]


class StdoutSink(SinkPort):
    """Write one JSON document per event to a text stream.

    Values that are not JSON-serializable are written as strings.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def push(self, event: Event) -> None:
        self.stream.write(json.dumps(event, default=str) + "\n")
        self.stream.flush()
