from redis.exceptions import RedisError

from bucket_counter.core.config import Settings, settings as default_settings
from bucket_counter.core.logger import get_logger
from bucket_counter.core.retry import retry_async
from bucket_counter.infrastructure.redis.store import RedisStore
from bucket_counter.infrastructure.store import TimeSeriesStore
from bucket_counter.services.counter import BucketedCounter

logger = get_logger("bucket_counter.startup")


async def connect_redis_store(settings: Settings | None = None) -> RedisStore:
    """Open a RedisStore and wait until the server answers PING."""
    settings = settings or default_settings
    store = RedisStore.from_url(settings.resolved_redis_url())

    def _log_retry(attempt: int, exc: BaseException, sleep_for: float) -> None:
        logger.warning(
            "redis_connect_retry",
            extra={"attempt": attempt, "error": str(exc), "sleep_for": sleep_for},
        )

    try:
        await retry_async(
            store.ping,
            retries=settings.redis_connect_retries,
            base_delay=settings.redis_connect_base_delay_seconds,
            retry_on=(RedisError, OSError),
            on_retry=_log_retry,
        )
    except Exception:
        await store.close()
        raise
    logger.info("redis_connected", extra={"redis_db": settings.redis_db})
    return store


async def create_counter(
    settings: Settings | None = None,
    store: TimeSeriesStore | None = None,
) -> BucketedCounter:
    """Build a BucketedCounter from settings, connecting to Redis unless a store is given."""
    settings = settings or default_settings
    if store is None:
        store = await connect_redis_store(settings)
    counter = BucketedCounter(
        settings.counter_name,
        settings.counter_timestep_seconds,
        settings.counter_ttl_seconds,
        store,
        propagate_expiry_errors=settings.counter_propagate_expiry_errors,
        inclusive_end=settings.counter_inclusive_end,
    )
    logger.info(
        "counter_initialized",
        extra={
            "counter": counter.name,
            "timestep_seconds": counter.timestep,
            "ttl_seconds": counter.ttl,
        },
    )
    return counter
