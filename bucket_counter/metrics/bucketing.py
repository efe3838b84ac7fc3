import math
from datetime import datetime, timedelta
from typing import Iterator, List, Union

from bucket_counter.domain.models import BucketKeys
from bucket_counter.infrastructure.redis import constants

Instant = Union[datetime, int, float]


def to_epoch_seconds(instant: Instant) -> float:
    """Unix seconds for a datetime or a numeric epoch timestamp.

    Naive datetimes are interpreted as local time, as ``datetime.timestamp``
    does.
    """
    if isinstance(instant, datetime):
        return instant.timestamp()
    if isinstance(instant, bool) or not isinstance(instant, (int, float)):
        raise TypeError(f"unsupported instant type: {type(instant).__name__}")
    return float(instant)


def to_seconds(duration: Union[timedelta, int, float]) -> float:
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    return float(duration)


def bucket_start(timestamp_seconds: float, granularity_seconds: int) -> int:
    return int(math.floor(timestamp_seconds / granularity_seconds) * granularity_seconds)


def iter_bucket_starts(
    start_timestamp_seconds: float,
    end_timestamp_seconds: float,
    granularity_seconds: int,
) -> Iterator[int]:
    """Buckets touched by a query over [start, end], in ascending order.

    Starts at the bucket containing ``start`` and keeps stepping while the
    bucket start is not after ``end``.
    """
    t = bucket_start(start_timestamp_seconds, granularity_seconds)
    while t <= end_timestamp_seconds:
        yield t
        t += granularity_seconds


def enumerate_bucket_starts(
    start_timestamp_seconds: float,
    end_timestamp_seconds: float,
    granularity_seconds: int,
) -> List[int]:
    return list(
        iter_bucket_starts(
            start_timestamp_seconds, end_timestamp_seconds, granularity_seconds
        )
    )


def series_member(name: str, counter_value: int) -> str:
    return constants.SERIES_MEMBER.format(name=name, counter_value=counter_value)


def keys_for_bucket(name: str, bucket: int) -> BucketKeys:
    return BucketKeys(
        bucket_start=bucket,
        counter_key=constants.COUNTER_KEY.format(name=name, bucket_start=bucket),
        series_key=constants.SERIES_KEY.format(name=name, bucket_start=bucket),
    )


def bucket_keys(name: str, timestamp_seconds: float, granularity_seconds: int) -> BucketKeys:
    return keys_for_bucket(name, bucket_start(timestamp_seconds, granularity_seconds))
