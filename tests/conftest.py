import fakeredis.aioredis
import pytest

from bucket_counter import InMemoryStore, RedisStore


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock(1_700_000_000)


@pytest.fixture
def memory_store(clock):
    return InMemoryStore(clock)


@pytest.fixture
def fake_redis():
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture
def redis_store(fake_redis):
    return RedisStore(fake_redis)
