"""Tests for the pipeline decoration hook and stdout sink."""

import io
import json
from datetime import datetime

from rest_input.adapters.driven.pipeline.decoration import TIMESTAMP_FIELD, make_decorate
from rest_input.adapters.driven.sink.stdout import StdoutSink

__all__ = []


def test_decorate_adds_timestamp() -> None:
    """An ingest timestamp should be added when absent."""
    event = make_decorate()({"status": "ok"})

    assert datetime.fromisoformat(event[TIMESTAMP_FIELD]).tzinfo is not None


def test_decorate_keeps_existing_fields() -> None:
    """Fields already on the event should not be overwritten."""
    decorate = make_decorate(type_="health", add_field={"env": "prod", "status": "x"})

    event = decorate({TIMESTAMP_FIELD: "t0", "type": "custom", "status": "ok"})

    assert event[TIMESTAMP_FIELD] == "t0"
    assert event["type"] == "custom"
    assert event["status"] == "ok"
    assert event["env"] == "prod"


def test_decorate_sets_type_and_tags() -> None:
    """Type and tags should be added to a bare event."""
    event = make_decorate(type_="health", tags=["rest", "poll"])({})

    assert event["type"] == "health"
    assert event["tags"] == ["rest", "poll"]


def test_decorate_extends_existing_tags_without_duplicates() -> None:
    """Configured tags should be appended to existing ones."""
    decorate = make_decorate(tags=["rest", "poll"])

    assert decorate({"tags": ["rest"]})["tags"] == ["rest", "poll"]
    assert decorate({"tags": "upstream"})["tags"] == ["upstream", "rest", "poll"]


def test_stdout_sink_writes_json_lines() -> None:
    """Each pushed event should be one JSON line."""
    stream = io.StringIO()
    sink = StdoutSink(stream)

    sink.push({"meta_name": "svc", "meta_success": True})
    sink.push({"when": datetime(2024, 1, 1)})

    lines = stream.getvalue().splitlines()
    assert json.loads(lines[0]) == {"meta_name": "svc", "meta_success": True}
    assert json.loads(lines[1]) == {"when": "2024-01-01 00:00:00"}
