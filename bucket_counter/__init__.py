"""Bucketed, time-windowed event counter backed by Redis sorted sets."""

from bucket_counter.domain.errors import InvalidRangeError, StoreError, TimeSeriesError
from bucket_counter.domain.models import BucketKeys, CounterOptions
from bucket_counter.infrastructure.memory.store import InMemoryStore
from bucket_counter.infrastructure.redis.store import RedisStore
from bucket_counter.infrastructure.store import TimeSeriesStore
from bucket_counter.services.counter import BucketedCounter

__all__ = [
    "BucketedCounter",
    "BucketKeys",
    "CounterOptions",
    "InMemoryStore",
    "InvalidRangeError",
    "RedisStore",
    "StoreError",
    "TimeSeriesError",
    "TimeSeriesStore",
]
