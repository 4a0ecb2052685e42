from typing import Any

from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from domain_config.core.base_models import utcnow
from domain_config.domains.models import Domain, DomainCreate


async def create_domain(*, session: AsyncSession, domain_in: DomainCreate) -> Domain:
    """Create a new domain.

    Args:
        session: Database session
        domain_in: Domain creation data (name already normalized)

    Returns:
        Created domain

    Raises:
        IntegrityError: If the name is taken or the config does not exist.
    """
    db_domain = Domain(**domain_in.model_dump())
    session.add(db_domain)
    await session.commit()
    await session.refresh(db_domain)
    return db_domain


async def get_domain(*, session: AsyncSession, domain_id: int) -> Domain | None:
    return await session.get(Domain, domain_id)


async def get_domain_by_name(*, session: AsyncSession, name: str) -> Domain | None:
    """Get a domain by its exact (normalized) name."""
    statement = select(Domain).where(Domain.domain == name)
    result = await session.exec(statement)
    return result.first()


async def get_domains(
    *, session: AsyncSession, skip: int = 0, limit: int = 100
) -> list[Domain]:
    statement = select(Domain).order_by(Domain.id).offset(skip).limit(limit)
    result = await session.exec(statement)
    return list(result.all())


async def count_domains(*, session: AsyncSession) -> int:
    result = await session.exec(select(func.count()).select_from(Domain))
    return result.one()


async def get_domain_names_by_config(
    *, session: AsyncSession, config_id: int
) -> list[str]:
    """Names of every domain pointing at a configuration."""
    statement = (
        select(Domain.domain)
        .where(Domain.config_id == config_id)
        .order_by(Domain.id)
    )
    result = await session.exec(statement)
    return list(result.all())


async def update_domain(
    *, session: AsyncSession, db_domain: Domain, changes: dict[str, Any]
) -> Domain:
    """Apply a partial update to a domain.

    Args:
        session: Database session
        db_domain: Domain to update
        changes: Field values to set, keyed by attribute name

    Returns:
        Updated domain
    """
    db_domain.sqlmodel_update(changes)
    db_domain.updated_at = utcnow()
    session.add(db_domain)
    await session.commit()
    await session.refresh(db_domain)
    return db_domain


async def delete_domain(*, session: AsyncSession, db_domain: Domain) -> None:
    await session.delete(db_domain)
    await session.commit()
