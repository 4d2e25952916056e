import logging
from typing import Optional

import backoff
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError

logger = logging.getLogger(__name__)

redis: Optional[Redis] = None


def init_redis(redis_client: Redis):
    global redis
    redis = redis_client


def get_redis() -> Redis:
    if not redis:
        raise ValueError("Redis client is not initialized.")
    return redis


async def ping_redis(redis_client: Redis, max_time: int) -> None:
    @backoff.on_exception(
        backoff.expo,
        RedisConnectionError,
        max_time=max_time,
        on_backoff=lambda details: logger.warning(
            "Redis is not reachable yet, retry #%s", details["tries"]
        ),
    )
    async def _ping():
        await redis_client.ping()

    await _ping()


async def close_redis():
    global redis
    if redis:
        await redis.aclose()
        redis = None
