"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO
from pythonjsonlogger import jsonlogger

from finance_tracker.config import settings

# httpx logs full request URLs at INFO, which would include the Gemini API key
QUIET_LOGGERS = ("httpx", "httpcore")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON lines tagged with UTC time, level, and the service name"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """Route every log record through one JSON handler on stdout"""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_store_failure(operation: str, error: Exception) -> None:
    """Log a rolled-back store operation"""
    logging.error(
        "Store operation failed",
        extra={
            "step": "store_write",
            "operation": operation,
            "error": str(error),
        },
    )


def log_recurring_charge(subscription_id: str, month: str, created: bool) -> None:
    logging.info(
        "Recurring charge materialized" if created else "Recurring charge already present",
        extra={
            "step": "materialize",
            "subscription_id": subscription_id,
            "billing_month": month,
            "charge_created": created,
        },
    )


def log_parse_outcome(ok: bool, duration_ms: float, error: Optional[str] = None) -> None:
    """Log a natural-language parse attempt; the typed text itself is not logged"""
    logging.log(
        logging.INFO if ok else logging.WARNING,
        "Expense parse completed" if ok else "Expense parse failed",
        extra={
            "step": "parse_expense",
            "outcome": "ok" if ok else "failed",
            "duration_ms": round(duration_ms, 1),
            "error": error,
        },
    )
