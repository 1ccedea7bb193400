"""Structured Logging — verifies the JSON formatter surfaces build/relay context."""

import json
import logging

from trustgraph.infrastructure.observability import JSONFormatter


def _record(**extra):
    record = logging.LogRecord(
        "trustgraph.services.graph_builder", logging.INFO, __file__, 1,
        "Found %d users at depth 1", (3,), None,
    )
    record.__dict__.update(extra)
    return record


def test_message_and_level():
    out = json.loads(JSONFormatter().format(_record()))
    assert out["message"] == "Found 3 users at depth 1"
    assert out["level"] == "INFO"
    assert out["logger"] == "trustgraph.services.graph_builder"
    assert "timestamp" in out


def test_known_extras_are_included_and_unset_ones_omitted():
    out = json.loads(JSONFormatter().format(
        _record(build_id="b-1", depth=1, frontier=3, unrelated="x"),
    ))
    assert out["build_id"] == "b-1"
    assert out["depth"] == 1
    assert out["frontier"] == 3
    assert "relay" not in out
    assert "unrelated" not in out
