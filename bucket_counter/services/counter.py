import math
import time
from datetime import timedelta
from typing import Any, Awaitable, Callable, List, Union

from bucket_counter.core.logger import get_logger
from bucket_counter.domain.errors import InvalidRangeError, StoreError
from bucket_counter.domain.models import BucketKeys, CounterOptions
from bucket_counter.infrastructure.store import TimeSeriesStore
from bucket_counter.metrics.bucketing import (
    Instant,
    bucket_keys,
    enumerate_bucket_starts,
    iter_bucket_starts,
    keys_for_bucket,
    series_member,
    to_epoch_seconds,
    to_seconds,
)
from bucket_counter.metrics.instruments import (
    EVENTS_RECORDED_TOTAL,
    EXPIRY_ERRORS_SUPPRESSED_TOTAL,
    RANGE_BUCKETS_SCANNED,
    RANGE_QUERY_LATENCY_SECONDS,
    STORE_ERRORS_TOTAL,
)

logger = get_logger("bucket_counter.counter")

Duration = Union[timedelta, int, float]


class BucketedCounter:
    """Time-bucketed event counter on top of an ordered key-value store.

    Each bucket of ``timestep`` seconds owns two keys:

    - ``<name>:counter:<bucket>``: INCR sequence handing out event ids.
    - ``<name>:ts:<bucket>``: sorted set with one member ``<name>:<id>`` per
      event, scored by the event's whole Unix second.

    Both keys get ``ttl`` seconds of expiry on every write, so buckets vanish
    after a period without writes. Nothing else tracks which buckets exist.

    Known limitation: a unit whose ZADD fails leaves its counter id reserved
    but invisible to ``range``. Units recorded earlier in the same call are
    not rolled back.
    """

    def __init__(
        self,
        name: str,
        timestep: Duration,
        ttl: Duration,
        store: TimeSeriesStore,
        *,
        propagate_expiry_errors: bool = True,
        inclusive_end: bool = True,
        clock: Callable[[], float] = time.time,
    ):
        self.options = CounterOptions(
            name=name,
            timestep_seconds=timestep,
            ttl_seconds=ttl,
            propagate_expiry_errors=propagate_expiry_errors,
            inclusive_end=inclusive_end,
        )
        self.store = store
        self._clock = clock

    @property
    def name(self) -> str:
        return self.options.name

    @property
    def timestep(self) -> int:
        return self.options.timestep_seconds

    @property
    def ttl(self) -> int:
        return self.options.ttl_seconds

    def bucket_keys(self, instant: Instant) -> BucketKeys:
        return bucket_keys(self.name, to_epoch_seconds(instant), self.timestep)

    def bucket_starts(self, start: Instant, end: Instant) -> List[int]:
        return enumerate_bucket_starts(
            to_epoch_seconds(start), to_epoch_seconds(end), self.timestep
        )

    async def record_at(self, amount: int, instant: Instant) -> None:
        """Record ``amount`` separate events that happened at ``instant``.

        Every unit gets its own counter id and series member. Raises
        ``StoreError`` on the first failing primitive; units already written
        stay written.
        """
        if amount < 0:
            raise ValueError(f"amount must be non-negative, got {amount}")
        if amount == 0:
            return
        ts = to_epoch_seconds(instant)
        keys = self.bucket_keys(ts)
        score = float(math.floor(ts))
        recorded = 0
        try:
            for _ in range(amount):
                event_id = await self._call(
                    "incr", keys.counter_key, self.store.incr, keys.counter_key
                )
                await self._refresh_expiry(keys.counter_key)
                await self._call(
                    "zadd",
                    keys.series_key,
                    self.store.zadd,
                    keys.series_key,
                    score,
                    series_member(self.name, event_id),
                )
                recorded += 1
                EVENTS_RECORDED_TOTAL.inc()
                await self._refresh_expiry(keys.series_key)
        except StoreError as e:
            self._report_failure(e, recorded=recorded, requested=amount)
            raise
        logger.debug(
            "events_recorded",
            extra={
                "counter": self.name,
                "amount": amount,
                "bucket_start": keys.bucket_start,
            },
        )

    async def record(self, amount: int = 1) -> None:
        """Record ``amount`` events at the current clock time."""
        await self.record_at(amount, self._clock())

    async def range(self, start: Instant, end: Instant) -> float:
        """Sum of events recorded between ``start`` and ``end``.

        ``end`` is inclusive unless the counter was built with
        ``inclusive_end=False``, in which case the window is ``[start, end)``.
        Scores are whole seconds. Inclusive mode floors both bounds; half-open
        mode rounds both bounds up (``ceil(start)`` to ``ceil(end) - 1``), so
        an empty window never reaches the store.
        One ZCOUNT is issued per bucket spanned.
        """
        start_s = to_epoch_seconds(start)
        end_s = to_epoch_seconds(end)
        if start_s > end_s:
            raise InvalidRangeError(start_s, end_s)

        if self.options.inclusive_end:
            low = math.floor(start_s)
            high = math.floor(end_s)
        else:
            low = math.ceil(start_s)
            high = math.ceil(end_s) - 1
        if high < low:
            return 0.0

        began = time.perf_counter()
        total = 0
        scanned = 0
        try:
            for bucket in iter_bucket_starts(start_s, end_s, self.timestep):
                scanned += 1
                series_key = keys_for_bucket(self.name, bucket).series_key
                total += await self._call(
                    "zcount", series_key, self.store.zcount, series_key, low, high
                )
        except StoreError as e:
            self._report_failure(e)
            raise
        RANGE_QUERY_LATENCY_SECONDS.observe(time.perf_counter() - began)
        RANGE_BUCKETS_SCANNED.observe(scanned)
        return float(total)

    async def last(self, window: Duration) -> float:
        """Events over the trailing ``window`` ending at the current clock time."""
        now = self._clock()
        return await self.range(now - to_seconds(window), now)

    async def _refresh_expiry(self, key: str) -> None:
        try:
            await self._call("expire", key, self.store.expire, key, self.ttl)
        except StoreError as e:
            if self.options.propagate_expiry_errors:
                raise
            EXPIRY_ERRORS_SUPPRESSED_TOTAL.inc()
            logger.warning(
                "expiry_refresh_failed",
                extra={"counter": self.name, "key": key, "error": str(e)},
            )

    async def _call(
        self,
        operation: str,
        key: str,
        fn: Callable[..., Awaitable[Any]],
        *args: Any,
    ) -> Any:
        # Stores other than RedisStore may raise their own exception types
        try:
            return await fn(*args)
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(operation, key, str(e) or type(e).__name__) from e

    def _report_failure(self, err: StoreError, **extra: Any) -> None:
        STORE_ERRORS_TOTAL.labels(operation=err.operation).inc()
        logger.warning(
            "store_operation_failed",
            extra={
                "counter": self.name,
                "operation": err.operation,
                "key": err.key,
                "error": str(err),
                **extra,
            },
        )

    def __repr__(self) -> str:
        return (
            f"BucketedCounter(name={self.name!r}, timestep={self.timestep}, "
            f"ttl={self.ttl})"
        )
