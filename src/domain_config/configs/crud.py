from typing import Any

from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from domain_config.configs.models import Config, ConfigCreate
from domain_config.core.base_models import utcnow


async def create_config(*, session: AsyncSession, config_in: ConfigCreate) -> Config:
    """Create a new configuration.

    Args:
        session: Database session
        config_in: Configuration creation data

    Returns:
        Created configuration
    """
    db_config = Config(**config_in.model_dump())
    session.add(db_config)
    await session.commit()
    await session.refresh(db_config)
    return db_config


async def get_config(*, session: AsyncSession, config_id: int) -> Config | None:
    return await session.get(Config, config_id)


async def get_configs(
    *, session: AsyncSession, skip: int = 0, limit: int = 100
) -> list[Config]:
    statement = select(Config).order_by(Config.id).offset(skip).limit(limit)
    result = await session.exec(statement)
    return list(result.all())


async def count_configs(*, session: AsyncSession) -> int:
    result = await session.exec(select(func.count()).select_from(Config))
    return result.one()


async def update_config(
    *, session: AsyncSession, db_config: Config, changes: dict[str, Any]
) -> Config:
    """Apply a partial update to a configuration.

    Args:
        session: Database session
        db_config: Configuration to update
        changes: Field values to set, keyed by attribute name

    Returns:
        Updated configuration
    """
    db_config.sqlmodel_update(changes)
    db_config.updated_at = utcnow()
    session.add(db_config)
    await session.commit()
    await session.refresh(db_config)
    return db_config


async def delete_config(*, session: AsyncSession, db_config: Config) -> None:
    await session.delete(db_config)
    await session.commit()
