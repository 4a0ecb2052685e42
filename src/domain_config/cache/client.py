from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from domain_config.core.logging import get_logger

logger = get_logger(__name__)


def create_redis_client(url: str, socket_timeout: float = 1.0) -> Redis:
    """Build an asyncio Redis client.

    No connection is opened here; the pool connects on first use and
    reconnects on demand after failures.
    """
    return from_url(
        url,
        decode_responses=True,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
        health_check_interval=30,
    )


@asynccontextmanager
async def redis_lifespan(
    enabled: bool, url: str, socket_timeout: float = 1.0
) -> AsyncIterator[Redis | None]:
    """Own the Redis client for the lifetime of the application.

    Yields None when caching is disabled. An unreachable server at startup
    is logged and tolerated: the cache store treats every failure as a miss,
    and the pool keeps trying on later calls.
    """
    if not enabled:
        logger.info("redis_disabled")
        yield None
        return

    client = create_redis_client(url, socket_timeout)
    try:
        await client.ping()
        logger.info("redis_connected")
    except (RedisError, OSError) as e:
        logger.warning(
            "redis_unreachable_at_startup",
            error=str(e),
            error_type=type(e).__name__,
        )

    try:
        yield client
    finally:
        await client.aclose()
        logger.info("redis_closed")
