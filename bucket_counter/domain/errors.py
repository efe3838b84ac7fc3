"""Error taxonomy for the bucketed counter.

All errors raised by this package derive from ``TimeSeriesError`` so callers
can catch the whole family at once.
"""

from __future__ import annotations


class TimeSeriesError(Exception):
    """Base class for bucketed counter failures."""


class InvalidRangeError(TimeSeriesError, ValueError):
    """Raised when a range query starts after it ends."""

    def __init__(self, start: float, end: float):
        super().__init__(f"timeseries: range is invalid (start={start} > end={end})")
        self.start = start
        self.end = end


class StoreError(TimeSeriesError):
    """A store primitive failed.

    Attributes:
        operation: Primitive that failed (incr | zadd | zcount | expire).
        key: Store key the primitive was addressing.
    """

    def __init__(self, operation: str, key: str, message: str | None = None):
        detail = message or "store operation failed"
        super().__init__(f"{operation} {key}: {detail}")
        self.operation = operation
        self.key = key


__all__ = ["TimeSeriesError", "InvalidRangeError", "StoreError"]
