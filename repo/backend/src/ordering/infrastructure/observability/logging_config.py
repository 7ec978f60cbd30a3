from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from ordering.api.middleware.request_id import get_request_id
from ordering.infrastructure.observability.otel import trace_ids

_LOGGING_CONFIGURED = False

# Keys callers pass through ``extra=``; copied into the JSON line when set.
_HTTP_FIELDS = ("method", "path", "status_code", "duration_ms")
_ORDER_FIELDS = ("backend", "operation", "order_id", "line_count")

# The access middleware already logs one line per request.
_QUIETED_LOGGERS = ("uvicorn.access",)


class RequestContextFilter(logging.Filter):
    """Stamps request and trace ids on the record while still on the request's thread."""

    def filter(self, record: logging.LogRecord) -> bool:
        trace_id, span_id = trace_ids()
        record.request_id = get_request_id()
        record.trace_id = trace_id
        record.span_id = span_id
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
            "trace_id": getattr(record, "trace_id", None),
            "span_id": getattr(record, "span_id", None),
        }

        for key in _HTTP_FIELDS + _ORDER_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: str | None = None) -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)
    root_logger.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())

    for name in _QUIETED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
