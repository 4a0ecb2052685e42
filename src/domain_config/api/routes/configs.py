from typing import Any

from fastapi import APIRouter, Response, status

from domain_config.api.deps import (
    AcceptLanguageHeader,
    ConfigServiceDep,
    DomainServiceDep,
    LangQuery,
    PageQuery,
    PageSizeQuery,
    SettingsDep,
)
from domain_config.api.routes.domains import set_language_headers
from domain_config.configs import (
    ConfigCreate,
    ConfigPublic,
    ConfigsPublic,
    ConfigUpdate,
    LocalizedConfig,
)

router = APIRouter(prefix="/configs", tags=["configs"])


@router.get("/", response_model=ConfigsPublic)
async def read_configs(
    service: ConfigServiceDep,
    settings: SettingsDep,
    page: PageQuery = 1,
    page_size: PageSizeQuery = None,
) -> Any:
    return await service.list_configs(page, page_size or settings.DEFAULT_PAGE_SIZE)


@router.get("/{config_id}", response_model=LocalizedConfig)
async def read_config(
    config_id: int,
    response: Response,
    service: DomainServiceDep,
    lang: LangQuery = None,
    accept_language: AcceptLanguageHeader = None,
) -> Any:
    """Read a configuration, localized when multilingual content is enabled."""
    localized = await service.get_config(config_id, lang, accept_language)
    set_language_headers(response, localized.language)
    return localized


@router.post("/", response_model=ConfigPublic, status_code=status.HTTP_201_CREATED)
async def create_config(config_in: ConfigCreate, service: ConfigServiceDep) -> Any:
    return await service.create_config(config_in)


@router.put("/{config_id}", response_model=ConfigPublic)
async def update_config(
    config_id: int, config_in: ConfigUpdate, service: ConfigServiceDep
) -> Any:
    return await service.update_config(config_id, config_in)


@router.delete("/{config_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_config(config_id: int, service: ConfigServiceDep) -> None:
    await service.delete_config(config_id)
