"""Script to create initial data (a sample config served for example.com)."""

import asyncio
import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from domain_config.configs import ConfigCreate, create_config
from domain_config.core.db import engine
from domain_config.domains import DomainCreate, create_domain, get_domain_by_name
from domain_config.translations import Translation

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_DOMAIN = "example.com"

SAMPLE_TRANSLATIONS = {
    "zh-cn": {
        "title": "示例",
        "author": "示例作者",
        "description": "示例站点的配置",
        "keywords": ["示例", "配置"],
    },
    "en-us": {
        "title": "Example",
        "author": "Example Author",
        "description": "Configuration for the example site",
        "keywords": ["example", "config"],
    },
}


async def init() -> None:
    """Create the sample config, its translations and example.com if missing."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        if await get_domain_by_name(session=session, name=SAMPLE_DOMAIN):
            logger.info(f"{SAMPLE_DOMAIN} already exists, skipping")
            return

        config = await create_config(
            session=session,
            config_in=ConfigCreate(
                links={"home": "https://example.com"},
                permissions={"public": True},
            ),
        )
        logger.info(f"Created config: {config.id}")

        for language_code, fields in SAMPLE_TRANSLATIONS.items():
            session.add(
                Translation(
                    config_id=config.id, language_code=language_code, **fields
                )
            )
        await session.commit()
        logger.info(f"Created translations: {', '.join(SAMPLE_TRANSLATIONS)}")

        domain = await create_domain(
            session=session,
            domain_in=DomainCreate(
                domain=SAMPLE_DOMAIN,
                homepage="https://example.com",
                config_id=config.id,
            ),
        )
        logger.info(f"Created domain: {domain.domain}")


def main() -> None:
    logger.info("Creating initial data")
    asyncio.run(init())
    logger.info("Initial data created")


if __name__ == "__main__":
    main()
