"""JSON logging for the counter.

One JSON object per line with service metadata attached, so counter logs
can be shipped alongside the rest of the pipeline's structured logs.
"""

from __future__ import annotations

import json
import logging
import os
import socket
import traceback
from datetime import datetime, timezone
from typing import Iterable

from .config import settings

# LogRecord attributes that are noise in the JSON payload
_SKIPPED_ATTRS = frozenset(
    {"args", "msg", "exc_info", "exc_text", "stack_info", "relativeCreated", "msecs"}
)


class SensitiveDataFilter:
    def __init__(self, patterns: Iterable[str]):
        self.patterns = [p.lower() for p in patterns]

    def filter(self, data: dict) -> dict:
        out = {}
        for k, v in data.items():
            if any(p in k.lower() for p in self.patterns):
                out[k] = "[REDACTED]"
            elif isinstance(v, dict):
                out[k] = self.filter(v)
            else:
                out[k] = v
        return out


class CustomJsonFormatter(logging.Formatter):
    def __init__(
        self,
        service: str,
        environment: str,
        redaction_patterns: Iterable[str],
    ):
        super().__init__()
        self.hostname = socket.gethostname()
        self.pid = os.getpid()
        self.service_name = service
        self.environment = environment
        self.sensitive_filter = SensitiveDataFilter(redaction_patterns)

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        data = {k: v for k, v in record.__dict__.items() if k not in _SKIPPED_ATTRS}
        data["message"] = record.getMessage()
        data["timestamp"] = datetime.now(timezone.utc).isoformat()
        data["service"] = self.service_name
        data["hostname"] = self.hostname
        data["pid"] = self.pid
        data["environment"] = self.environment
        if record.exc_info:
            data["exception"] = self.format_exception(record.exc_info)
        data = self.sensitive_filter.filter(data)
        return json.dumps(data, default=str)

    @staticmethod
    def format_exception(exc_info) -> dict:
        et, ev, tb = exc_info
        out = {
            "type": et.__name__,
            "message": str(ev),
            "stack": traceback.format_tb(tb),
        }
        # StoreError context
        for attr in ("operation", "key"):
            if hasattr(ev, attr):
                out[attr] = getattr(ev, attr)
        return out


def configure_logging(
    service: str | None = None,
    environment: str | None = None,
    level: str | None = None,
    redaction_patterns: Iterable[str] | None = None,
) -> logging.Logger:
    handler = logging.StreamHandler()
    handler.setFormatter(
        CustomJsonFormatter(
            service or settings.otel_service_name,
            environment or settings.app_environment,
            (
                redaction_patterns
                if redaction_patterns is not None
                else settings.app_log_redaction_patterns
            ),
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]  # deterministic single handler
    level_name = (level or settings.app_log_level).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    from .logger import mark_configured

    mark_configured()
    return root


__all__ = ["CustomJsonFormatter", "SensitiveDataFilter", "configure_logging"]
