"""Redis connection for the counter cache."""

import redis.asyncio as redis
from loguru import logger
from redis.exceptions import RedisError

from helpnet.config.settings import settings


async def get_redis_client() -> redis.Redis:
    """
    Connect to the counter cache.

    An unreachable server is logged, not raised: the synchronizer's first
    cache access fails instead and the pass is retried on the next tick.

    Returns:
        redis.Redis: Client with decode_responses=True
    """
    client = redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password,
        db=settings.redis_db,
        decode_responses=True,
    )
    try:
        await client.ping()
    except RedisError as e:
        logger.warning(f"Counter cache at {get_redis_url_masked()} not reachable yet: {e}")
    return client


def get_redis_url_masked() -> str:
    """Counter cache URL with the password hidden, for logs."""
    auth = ":****@" if settings.redis_password else ""
    return f"redis://{auth}{settings.redis_host}:{settings.redis_port}/{settings.redis_db}"
