"""Unit tests for JSON logging setup"""

import io
import json
import logging
import pytest
from finance_tracker.infrastructure.observability.logging import log_recurring_charge, setup_logging


@pytest.fixture
def log_stream():
    stream = io.StringIO()
    setup_logging("INFO", stream=stream)
    yield stream
    setup_logging("INFO")


def test_records_are_json_with_service_fields(log_stream: io.StringIO):
    logging.getLogger("finance_tracker.test").info("Charge created", extra={"billing_month": "2025-09"})

    record = json.loads(log_stream.getvalue().strip().splitlines()[-1])

    assert record["message"] == "Charge created"
    assert record["level"] == "INFO"
    assert record["service"] == "finance-tracker"
    assert record["billing_month"] == "2025-09"
    assert record["timestamp"].endswith("+00:00")


def test_http_client_info_logs_are_suppressed(log_stream: io.StringIO):
    logging.getLogger("httpx").info("HTTP Request: POST https://example.test/?key=secret")

    assert "secret" not in log_stream.getvalue()


def test_recurring_charge_log_carries_outcome(log_stream: io.StringIO):
    log_recurring_charge("sub-1", "2025-09", created=True)

    record = json.loads(log_stream.getvalue().strip().splitlines()[-1])

    assert record["message"] == "Recurring charge materialized"
    assert record["charge_created"] is True
    assert record["billing_month"] == "2025-09"
    assert record["subscription_id"] == "sub-1"
