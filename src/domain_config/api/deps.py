from typing import Annotated

from fastapi import Depends, Header, Query, Request

from domain_config.configs.service import ConfigService
from domain_config.core.config import Settings, get_settings
from domain_config.domains.service import DomainResolutionService

SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_domain_service(request: Request) -> DomainResolutionService:
    """Service instance built in the application lifespan."""
    service: DomainResolutionService = request.app.state.domain_service
    return service


def get_config_service(request: Request) -> ConfigService:
    service: ConfigService = request.app.state.config_service
    return service


DomainServiceDep = Annotated[DomainResolutionService, Depends(get_domain_service)]
ConfigServiceDep = Annotated[ConfigService, Depends(get_config_service)]

# Explicit language override; outranks Accept-Language
LangQuery = Annotated[
    str | None, Query(description="Language code, e.g. en-us or zh_CN")
]
AcceptLanguageHeader = Annotated[str | None, Header(alias="Accept-Language")]

PageQuery = Annotated[int, Query(description="1-based page number")]
PageSizeQuery = Annotated[int | None, Query(alias="pageSize")]
