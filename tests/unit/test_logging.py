"""Tests for structured logging."""

from __future__ import annotations

import json
import logging

from ipoib_network_operator.logging import StructuredFormatter, log_resource_event
from ipoib_network_operator.utils.context import get_context_dict, with_correlation_id


def make_record(message, **extra):
    record = logging.LogRecord("ipoib_network_operator.test", logging.WARNING, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Rendering log records."""

    def test_plain_record_wrapped_as_json(self):
        output = StructuredFormatter().format(make_record("Started 4 workers"))

        data = json.loads(output)
        assert data["message"] == "Started 4 workers"
        assert data["level"] == "WARNING"
        assert data["logger"] == "ipoib_network_operator.test"

    def test_plain_record_carries_correlation_id(self):
        with with_correlation_id("abc123"):
            output = StructuredFormatter().format(make_record("Retrying"))

        assert json.loads(output)["correlation_id"] == "abc123"

    def test_structured_record_passed_through(self):
        message = json.dumps({"event": "reconcile"})

        output = StructuredFormatter().format(make_record(message, structured=True))

        assert output == message


class TestLogResourceEvent:
    """Resource event log lines."""

    def test_fields(self, caplog):
        logger = logging.getLogger("ipoib_network_operator.test")

        with caplog.at_level(logging.INFO), with_correlation_id("corr-1"):
            log_resource_event(
                logger,
                controller="ipoib-network-operator",
                resource_kind="IPoIBNetwork",
                resource_name="net-a",
                namespace="",
                event="requeue",
                reason="NotReady",
                message="Resource is notReady",
                delay=5,
            )

        data = json.loads(caplog.records[-1].getMessage())
        assert data["resource"] == "IPoIBNetwork"
        assert data["level"] == "INFO"
        assert data["correlation_id"] == "corr-1"
        assert data["delay"] == 5


class TestContextDict:
    """Context fields outside an attempt."""

    def test_empty_without_context(self):
        assert get_context_dict() == {}

    def test_additional_fields_merged(self):
        with with_correlation_id("corr-2"):
            ctx = get_context_dict({"state": "ready"})

        assert ctx == {"correlation_id": "corr-2", "state": "ready"}
