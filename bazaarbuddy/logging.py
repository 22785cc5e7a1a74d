import logging
import json
import os
from typing import Any, Dict
from opentelemetry.trace import get_current_span


SENSITIVE_KEYS = {
    "otp", "password", "token", "access", "refresh", "email", "phone",
    "delivery_address", "deliveryAddress",
}
REDACTED = "[REDACTED]"


def current_request_id() -> str:
    try:
        from flask import g
        return getattr(g, "request_id", None) or "n/a"
    except RuntimeError:
        # outside of an application/request context
        return "n/a"


def current_trace_ids():
    span = get_current_span()
    ctx = span.get_span_context() if span else None
    if not ctx or not ctx.is_valid:
        return "n/a", "n/a"
    return format(ctx.trace_id, "032x"), format(ctx.span_id, "016x")


class ContextFilter(logging.Filter):
    """Stamp request and trace ids onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id()
        record.trace_id, record.span_id = current_trace_ids()
        return True


def mask(data: Any) -> Any:
    if isinstance(data, dict):
        return {
            key: (REDACTED if key in SENSITIVE_KEYS else mask(value))
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [mask(v) for v in data]
    return data


class MaskingFilter(logging.Filter):
    """Redact sensitive keys in dict-style log messages.

    DEBUG records are left untouched outside production so that local
    troubleshooting still sees full payloads.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        env = os.getenv("APP_ENV", "development").lower()
        if record.levelno == logging.DEBUG and env != "production":
            return True
        if isinstance(record.msg, dict):
            record.msg = mask(record.msg)
        if isinstance(record.args, dict):
            record.args = mask(record.args)
        return True


class JsonFormatter(logging.Formatter):
    def __init__(self, service: str = "bazaarbuddy", **kwargs):
        super().__init__(**kwargs)
        self.service = service

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        base: Dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "service": self.service,
            "name": record.name,
            "request_id": getattr(record, "request_id", "n/a"),
            "trace_id": getattr(record, "trace_id", "n/a"),
            "span_id": getattr(record, "span_id", "n/a"),
        }
        if isinstance(record.msg, dict):
            base.update(record.msg)
        else:
            base["message"] = record.getMessage()
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, default=str)


def configure_logging(app) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(
        JsonFormatter(
            service=app.config.get("OTEL_SERVICE_NAME", "bazaarbuddy"),
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )
    handler.addFilter(ContextFilter())
    handler.addFilter(MaskingFilter())

    level_name = os.getenv("LOG_LEVEL")
    if level_name:
        level = getattr(logging, level_name.upper(), logging.INFO)
    else:
        level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO

    app.logger.handlers.clear()
    app.logger.addHandler(handler)
    app.logger.setLevel(level)

    root = logging.getLogger()
    if not any(isinstance(h.formatter, JsonFormatter) for h in root.handlers):
        root.addHandler(handler)
    root.setLevel(level)

    wl = logging.getLogger("werkzeug")
    wl.setLevel(level)
    wl.handlers.clear()
    wl.addHandler(handler)
