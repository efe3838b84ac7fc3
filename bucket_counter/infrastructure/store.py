from typing import Protocol, runtime_checkable


@runtime_checkable
class TimeSeriesStore(Protocol):
    """Capabilities a bucketed counter needs from an ordered key-value store.

    Mirrors the Redis commands INCR, ZADD, ZCOUNT and EXPIRE. Every method
    is a coroutine so callers can bound it with ``asyncio.timeout`` or cancel
    the surrounding task.
    """

    async def incr(self, key: str) -> int:
        """Atomically increment ``key`` (created at 0) and return the new value."""
        ...

    async def zadd(self, key: str, score: float, member: str) -> None:
        """Add ``member`` with ``score``; an existing member only has its score updated."""
        ...

    async def zcount(self, key: str, low: float, high: float) -> int:
        """Count members scored within ``[low, high]``."""
        ...

    async def expire(self, key: str, seconds: int) -> None:
        """Set or refresh the time-to-live of ``key``."""
        ...
