from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from bucket_counter.domain.errors import StoreError


class RedisStore:
    """TimeSeriesStore backed by ``redis.asyncio.Redis``.

    Notes:
        - One command per call; the counter relies on INCR atomicity only.
        - ``RedisError`` is re-raised as ``StoreError`` naming command and key.
    """

    def __init__(self, client: redis.Redis):
        self.r = client

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "RedisStore":
        kwargs.setdefault("decode_responses", True)
        return cls(redis.Redis.from_url(url, **kwargs))

    async def incr(self, key: str) -> int:
        try:
            return int(await self.r.incr(key))
        except RedisError as e:
            raise StoreError("incr", key, str(e)) from e

    async def zadd(self, key: str, score: float, member: str) -> None:
        try:
            await self.r.zadd(key, {member: score})
        except RedisError as e:
            raise StoreError("zadd", key, str(e)) from e

    async def zcount(self, key: str, low: float, high: float) -> int:
        try:
            return int(await self.r.zcount(key, low, high))
        except RedisError as e:
            raise StoreError("zcount", key, str(e)) from e

    async def expire(self, key: str, seconds: int) -> None:
        try:
            await self.r.expire(key, seconds)
        except RedisError as e:
            raise StoreError("expire", key, str(e)) from e

    async def ping(self) -> bool:
        return bool(await self.r.ping())

    async def close(self) -> None:
        await self.r.aclose()
