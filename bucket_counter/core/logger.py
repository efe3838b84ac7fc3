from __future__ import annotations

import logging
from typing import Iterable

from .config import settings

_configured = False


class RedactingFilter(logging.Filter):
    """Blanks out whole log messages that mention a sensitive pattern."""

    def __init__(self, patterns: Iterable[str]):
        super().__init__()
        self.patterns = [p.lower() for p in patterns]

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        msg = record.getMessage().lower()
        if any(p in msg for p in self.patterns):
            record.msg = "[REDACTED SENSITIVE LOG CONTENT]"
            record.args = ()
        return True


def get_logger(name: str, auto_configure: bool = True) -> logging.Logger:
    """Return a named logger, installing a minimal config on first use.

    Applications that want JSON output call
    ``bucket_counter.core.logging_config.configure_logging`` first; this
    helper then leaves their handlers alone.
    """
    global _configured

    if auto_configure and not _configured:
        _configure_minimal_logging()
        _configured = True

    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


def _configure_minimal_logging():
    logging.basicConfig(
        level=getattr(logging, settings.app_log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    root = logging.getLogger()
    for h in root.handlers:
        h.addFilter(RedactingFilter(settings.app_log_redaction_patterns))


def is_configured() -> bool:
    return _configured


def mark_configured():
    """Called by configure_logging so get_logger skips the fallback setup."""
    global _configured
    _configured = True
