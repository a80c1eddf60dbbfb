"""Structured logging configuration for the IPoIB Network Operator.

Every line written to stdout is a JSON document. Resource events logged with
``log_resource_event`` carry the controller, resource and event fields; any
other record is wrapped with its level, logger name and the current context.
"""

import json
import logging
import sys
from typing import Any

from .utils.context import get_context_dict


class StructuredFormatter(logging.Formatter):
    """Renders records as JSON, leaving pre-rendered resource events as is."""

    def format(self, record: logging.LogRecord) -> str:
        if getattr(record, "structured", False):
            return record.getMessage()

        log_data = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(get_context_dict())
        if record.exc_info:
            log_data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def setup_structured_logging(level: str = "INFO") -> None:
    """Send JSON logs to stdout at ``level``."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )


def log_resource_event(
    logger: logging.Logger,
    controller: str,
    resource_kind: str,
    resource_name: str,
    namespace: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured resource event."""
    log_data = {
        "controller": controller,
        "level": logging.getLevelName(level),
        "resource": resource_kind,
        "name": resource_name,
        "namespace": namespace,
        "event": event,
        "reason": reason,
        "message": message,
    }
    log_data.update(get_context_dict(kwargs))
    logger.log(level, json.dumps(log_data, default=str), extra={"structured": True})
