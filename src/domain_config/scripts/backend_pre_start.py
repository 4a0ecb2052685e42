"""Pre-start script: wait until the database (and Redis, if enabled) answer."""

import asyncio
import logging

from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from tenacity import after_log, before_log, retry, stop_after_attempt, wait_fixed

from domain_config.cache import create_redis_client
from domain_config.core.config import settings
from domain_config.core.db import engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

max_tries = 60 * 5  # 5 minutes
wait_seconds = 1


@retry(
    stop=stop_after_attempt(max_tries),
    wait=wait_fixed(wait_seconds),
    before=before_log(logger, logging.INFO),
    after=after_log(logger, logging.WARN),
)
async def init(engine: AsyncEngine) -> None:
    """Wait for database to be ready by attempting a simple query."""
    try:
        async with AsyncSession(engine) as session:
            await session.exec(select(1))
    except Exception as e:
        logger.error(f"Database not ready: {e}")
        raise e


async def check_redis() -> None:
    """Report Redis reachability. The service runs without it, so never fatal."""
    client = create_redis_client(
        settings.REDIS_URL, settings.REDIS_SOCKET_TIMEOUT_SECONDS
    )
    try:
        await client.ping()
        logger.info("Redis reachable")
    except (RedisError, OSError) as e:
        logger.warning(f"Redis not reachable, cache will be bypassed: {e}")
    finally:
        await client.aclose()


async def run() -> None:
    await init(engine)
    if settings.REDIS_ENABLED:
        await check_redis()
    await engine.dispose()


def main() -> None:
    """Main function to initialize database connection."""
    logger.info("Initializing service")
    asyncio.run(run())
    logger.info("Service finished initializing")


if __name__ == "__main__":
    main()
