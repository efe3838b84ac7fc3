"""In-process store with Redis-like expiry, for tests and local runs.

Not for production: state lives in one process and is lost on exit.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, Union

from bucket_counter.domain.errors import StoreError

_Value = Union[int, Dict[str, float]]


class InMemoryStore:
    """Dict-backed TimeSeriesStore.

    Expiry follows Redis: a key whose deadline has passed reads as absent,
    INCR keeps an existing ttl, and a non-positive EXPIRE deletes the key.
    No method awaits while mutating, so each call is atomic on the event loop.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._data: Dict[str, _Value] = {}
        # key -> absolute deadline (epoch seconds)
        self._deadlines: Dict[str, float] = {}

    async def incr(self, key: str) -> int:
        value = self._get(key)
        if value is None:
            value = 0
        elif not isinstance(value, int):
            raise StoreError("incr", key, "WRONGTYPE key holds a sorted set")
        value += 1
        self._data[key] = value
        return value

    async def zadd(self, key: str, score: float, member: str) -> None:
        zset = self._get(key)
        if zset is None:
            zset = {}
            self._data[key] = zset
        elif not isinstance(zset, dict):
            raise StoreError("zadd", key, "WRONGTYPE key holds a counter")
        zset[member] = float(score)

    async def zcount(self, key: str, low: float, high: float) -> int:
        zset = self._get(key)
        if zset is None:
            return 0
        if not isinstance(zset, dict):
            raise StoreError("zcount", key, "WRONGTYPE key holds a counter")
        return sum(1 for score in zset.values() if low <= score <= high)

    async def expire(self, key: str, seconds: int) -> None:
        if self._get(key) is None:
            return
        if seconds <= 0:
            self._delete(key)
            return
        self._deadlines[key] = self._clock() + seconds

    def ttl(self, key: str) -> int:
        """Remaining seconds like Redis TTL: -2 if missing, -1 if no expiry."""
        if self._get(key) is None:
            return -2
        deadline = self._deadlines.get(key)
        if deadline is None:
            return -1
        return int(round(deadline - self._clock()))

    def keys(self) -> list[str]:
        return [k for k in list(self._data) if self._get(k) is not None]

    def _get(self, key: str) -> _Value | None:
        deadline = self._deadlines.get(key)
        if deadline is not None and self._clock() >= deadline:
            self._delete(key)
            return None
        return self._data.get(key)

    def _delete(self, key: str) -> None:
        self._data.pop(key, None)
        self._deadlines.pop(key, None)
