"""Tests for structlog configuration."""

from __future__ import annotations

import io
import json

import pytest
import structlog

from articlex.utils import setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    setup_logging()


def test_json_format_renders_one_object_per_event():
    buf = io.StringIO()
    setup_logging(level="info", fmt="json", stream=buf)

    structlog.get_logger().bind(component="extraction.test").info("page_fetched", status=200)

    record = json.loads(buf.getvalue().strip())
    assert record["event"] == "page_fetched"
    assert record["component"] == "extraction.test"
    assert record["status"] == 200
    assert record["level"] == "info"


def test_level_filters_debug_events():
    buf = io.StringIO()
    setup_logging(level="warning", fmt="json", stream=buf)

    log = structlog.get_logger().bind(component="extraction.test")
    log.debug("cache_hit")
    log.info("extraction_succeeded")
    log.warning("fetch_failed")

    lines = buf.getvalue().strip().splitlines()
    assert [json.loads(line)["event"] for line in lines] == ["fetch_failed"]


def test_console_format_writes_to_stream():
    buf = io.StringIO()
    setup_logging(level="debug", fmt="console", stream=buf)

    structlog.get_logger().info("prewarm_complete", succeeded=3)

    assert "prewarm_complete" in buf.getvalue()
    assert "succeeded" in buf.getvalue()
