from typing import Any

from fastapi import APIRouter, Response, status

from domain_config.api.deps import (
    AcceptLanguageHeader,
    DomainServiceDep,
    LangQuery,
    PageQuery,
    PageSizeQuery,
    SettingsDep,
)
from domain_config.domains import (
    DomainCreate,
    DomainPublic,
    DomainsPublic,
    DomainUpdate,
    ResolvedDomain,
)

router = APIRouter(prefix="/domains", tags=["domains"])


def set_language_headers(response: Response, language: str | None) -> None:
    """Expose the language actually served to the client."""
    if language:
        response.headers["Content-Language"] = language
        response.headers["X-Content-Language"] = language


@router.get("/", response_model=DomainsPublic)
async def read_domains(
    service: DomainServiceDep,
    settings: SettingsDep,
    page: PageQuery = 1,
    page_size: PageSizeQuery = None,
) -> Any:
    """List domains, ordered by id."""
    return await service.list_domains(page, page_size or settings.DEFAULT_PAGE_SIZE)


@router.get("/id/{domain_id}", response_model=DomainPublic)
async def read_domain_by_id(domain_id: int, service: DomainServiceDep) -> Any:
    """Administrative read of a domain and its base configuration."""
    return await service.get_domain(domain_id)


@router.get("/{domain}", response_model=ResolvedDomain)
async def read_domain(
    domain: str,
    response: Response,
    service: DomainServiceDep,
    lang: LangQuery = None,
    accept_language: AcceptLanguageHeader = None,
) -> Any:
    """Resolve a domain name to its localized configuration.

    The language comes from `lang` when supported, then Accept-Language,
    then the default language.
    """
    resolved = await service.resolve_domain(domain, lang, accept_language)
    set_language_headers(response, resolved.config.language)
    return resolved


@router.post("/", response_model=DomainPublic, status_code=status.HTTP_201_CREATED)
async def create_domain(domain_in: DomainCreate, service: DomainServiceDep) -> Any:
    return await service.create_domain(domain_in)


@router.put("/{domain_id}", response_model=DomainPublic)
async def update_domain(
    domain_id: int, domain_in: DomainUpdate, service: DomainServiceDep
) -> Any:
    return await service.update_domain(domain_id, domain_in)


@router.delete("/{domain_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_domain(domain_id: int, service: DomainServiceDep) -> None:
    await service.delete_domain(domain_id)
