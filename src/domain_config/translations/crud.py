from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from domain_config.translations.models import Translation


async def get_translation(
    *, session: AsyncSession, config_id: int, language_code: str
) -> Translation | None:
    """Get the translation of a configuration in one language.

    Args:
        session: Database session
        config_id: Owning configuration ID
        language_code: Normalized language code

    Returns:
        Translation if one exists for that language, None otherwise
    """
    statement = select(Translation).where(
        Translation.config_id == config_id,
        Translation.language_code == language_code,
    )
    result = await session.exec(statement)
    return result.first()
