"""CRUD over base configurations with cache invalidation."""

from typing import TYPE_CHECKING

from domain_config.configs.models import (
    ConfigCreate,
    ConfigPublic,
    ConfigsPublic,
    ConfigUpdate,
)
from domain_config.core.base_models import PaginationMeta, page_offset
from domain_config.core.exceptions import ResourceInUseError, ResourceNotFoundError
from domain_config.core.logging import get_logger
from domain_config.core.tasks import gather_with_errors
from domain_config.domains.service import DomainResolutionService

if TYPE_CHECKING:
    from domain_config.store import ConfigStore

logger = get_logger(__name__)


class ConfigService:
    """Manage base configurations.

    Every successful update or delete drops all cached views of the
    configuration through the domain service.
    """

    def __init__(
        self,
        store: "ConfigStore",
        domains: DomainResolutionService,
        *,
        max_page_size: int = 100,
    ):
        self.store = store
        self.domains = domains
        self.max_page_size = max_page_size

    async def create_config(self, config_in: ConfigCreate) -> ConfigPublic:
        db_config = await self.store.create_config(config_in)
        logger.info("config_created", config_id=db_config.id)
        return ConfigPublic.model_validate(db_config)

    async def list_configs(self, page: int, page_size: int) -> ConfigsPublic:
        skip = page_offset(page, page_size, self.max_page_size)
        rows, total = await gather_with_errors(
            self.store.list_configs(skip, page_size),
            self.store.count_configs(),
        )
        return ConfigsPublic(
            data=[ConfigPublic.model_validate(row) for row in rows],
            pagination=PaginationMeta.build(page, page_size, total),
        )

    async def update_config(
        self, config_id: int, config_in: ConfigUpdate
    ) -> ConfigPublic:
        """Apply a partial update and invalidate every cached view.

        Raises:
            ResourceNotFoundError: If the config does not exist.
        """
        changes = config_in.model_dump(exclude_unset=True)
        db_config = await self.store.update_config(config_id, changes)
        if db_config is None:
            raise ResourceNotFoundError("Config", config_id)

        await self.domains.invalidate_config(config_id)
        logger.info("config_updated", config_id=config_id, fields=sorted(changes))
        return ConfigPublic.model_validate(db_config)

    async def delete_config(self, config_id: int) -> None:
        """Delete an unreferenced config.

        Raises:
            ResourceNotFoundError: If the config does not exist.
            ResourceInUseError: While any domain still points at it.
        """
        if await self.store.get_config(config_id) is None:
            raise ResourceNotFoundError("Config", config_id)

        names = await self.store.list_domain_names_by_config(config_id)
        if names:
            raise ResourceInUseError("Config", config_id, len(names))

        if not await self.store.delete_config(config_id):
            raise ResourceNotFoundError("Config", config_id)

        await self.domains.invalidate_config(config_id)
        logger.info("config_deleted", config_id=config_id)
