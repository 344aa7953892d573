"""Structured JSON logging for the user API.

Every record is one JSON object on stdout. Records emitted while a request
is being served carry its ``request_id``; when a recording OpenTelemetry span
is active they also carry ``trace_id`` and ``span_id``.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

from opentelemetry import trace
from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def current_request_id() -> Optional[str]:
    return _request_id.get()


@contextmanager
def request_context(request_id: str) -> Iterator[str]:
    """Tag every record logged inside the block with ``request_id``."""
    token = _request_id.set(request_id)
    try:
        yield request_id
    finally:
        _request_id.reset(token)


def _trace_fields() -> Dict[str, str]:
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return {}
    return {
        "trace_id": trace.format_trace_id(ctx.trace_id),
        "span_id": trace.format_span_id(ctx.span_id),
    }


class RequestJSONFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding service name, request id and trace ids."""

    def __init__(self, service: str, **kwargs: Any) -> None:
        super().__init__(
            LOG_FORMAT,
            rename_fields={"asctime": "timestamp", "levelname": "level"},
            static_fields={"service": service},
            **kwargs,
        )

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        request_id = current_request_id()
        if request_id and "request_id" not in log_record:
            log_record["request_id"] = request_id
        log_record.update(_trace_fields())
        log_record["level"] = str(log_record.get("level", record.levelname)).upper()


def setup_logging(level: str = "INFO", service: str = "usermgmt") -> None:
    """Send all records through a single stdout JSON handler."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(RequestJSONFormatter(service))

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    # Access lines come from RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").disabled = True
    logging.getLogger("pymongo").setLevel("WARNING")
