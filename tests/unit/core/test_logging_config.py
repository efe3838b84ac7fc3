import json
import logging
import sys

from bucket_counter.core.logger import is_configured
from bucket_counter.core.logging_config import (
    CustomJsonFormatter,
    SensitiveDataFilter,
    configure_logging,
)
from bucket_counter.domain.errors import StoreError


def _record(msg, extra=None, exc_info=None):
    record = logging.LogRecord("bucket_counter.counter", logging.WARNING, __file__, 10, msg, (), exc_info)
    for k, v in (extra or {}).items():
        setattr(record, k, v)
    return record


def test_formatter_emits_json_with_service_fields():
    formatter = CustomJsonFormatter("bucket-counter", "testing", ["password"])
    payload = json.loads(
        formatter.format(_record("events_recorded", {"counter": "clicks", "amount": 3}))
    )
    assert payload["message"] == "events_recorded"
    assert payload["service"] == "bucket-counter"
    assert payload["environment"] == "testing"
    assert payload["counter"] == "clicks"
    assert payload["amount"] == 3
    assert payload["levelname"] == "WARNING"
    assert "exc_info" not in payload


def test_formatter_includes_store_error_context():
    formatter = CustomJsonFormatter("bucket-counter", "testing", [])
    try:
        raise StoreError("zadd", "clicks:ts:60", "OOM")
    except StoreError:
        exc_info = sys.exc_info()
    payload = json.loads(formatter.format(_record("store_operation_failed", exc_info=exc_info)))
    assert payload["exception"]["type"] == "StoreError"
    assert payload["exception"]["operation"] == "zadd"
    assert payload["exception"]["key"] == "clicks:ts:60"


def test_sensitive_data_filter_redacts_nested_keys():
    out = SensitiveDataFilter(["password"]).filter(
        {"redis_password": "x", "nested": {"Password": "y", "ok": 1}}
    )
    assert out == {"redis_password": "[REDACTED]", "nested": {"Password": "[REDACTED]", "ok": 1}}


def test_configure_logging_installs_single_json_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(service="svc", environment="testing", level="debug")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, CustomJsonFormatter)
        assert root.level == logging.DEBUG
        assert is_configured()
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
