from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from functools import partial

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from domain_config.core.config import settings
from domain_config.core.exceptions import StoreUnavailableError
from domain_config.core.logging import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[[], AsyncSession]


def create_db_engine(url: str) -> AsyncEngine:
    """Create the async engine; pool sizing only applies to server databases."""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=False)
    return create_async_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=3600,
        echo=settings.DEBUG and settings.ENVIRONMENT == "local",
    )


engine = create_db_engine(settings.SQLALCHEMY_DATABASE_URI)


def make_session_factory(bind: AsyncEngine) -> SessionFactory:
    """Return a zero-argument callable producing fresh sessions.

    Objects stay readable after commit; nothing lazy-loads across the
    async boundary.
    """
    return partial(AsyncSession, bind, expire_on_commit=False)


async def create_db_and_tables(bind: AsyncEngine) -> None:
    """Create all tables. Production schemas are managed by Alembic."""
    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


@asynccontextmanager
async def store_errors(operation: str) -> AsyncIterator[None]:
    """Translate connectivity failures into StoreUnavailableError.

    Constraint violations and programming errors pass through untouched so
    callers can map them to domain conditions.

    Usage:
        async with store_errors("get_domain_by_name"):
            ...
    """
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        logger.error(
            "store_unavailable",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise StoreUnavailableError(operation, type(e).__name__) from e
