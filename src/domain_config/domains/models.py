from datetime import datetime

from pydantic import Field as PydanticField
from pydantic import field_validator
from sqlmodel import Field, SQLModel

from domain_config.configs.models import ConfigPublic, LocalizedConfig
from domain_config.core.base_models import (
    ApiModel,
    PaginatedResponse,
    TimestampedTable,
)
from domain_config.domains.matching import extract_host, is_valid_host


def _normalize_domain(value: str) -> str:
    host = extract_host(value)
    if not is_valid_host(host):
        raise ValueError(f"Invalid domain name: {value!r}")
    return host


class DomainBase(SQLModel):
    domain: str = Field(max_length=255, unique=True, index=True)
    homepage: str | None = Field(default=None, max_length=500)
    config_id: int = Field(foreign_key="configs.id", nullable=False, index=True)


class Domain(DomainBase, TimestampedTable, table=True):
    """A domain name mapped to one configuration."""

    __tablename__ = "domains"


class DomainCreate(ApiModel):
    domain: str = PydanticField(min_length=1, max_length=255)
    homepage: str | None = PydanticField(default=None, max_length=500)
    config_id: int = PydanticField(gt=0)

    @field_validator("domain")
    @classmethod
    def normalize_domain(cls, v: str) -> str:
        return _normalize_domain(v)


class DomainUpdate(ApiModel):
    domain: str | None = PydanticField(default=None, min_length=1, max_length=255)
    homepage: str | None = PydanticField(default=None, max_length=500)
    config_id: int | None = PydanticField(default=None, gt=0)

    @field_validator("domain")
    @classmethod
    def normalize_domain(cls, v: str | None) -> str | None:
        return _normalize_domain(v) if v is not None else None


class DomainPublic(ApiModel):
    id: int
    domain: str
    homepage: str | None = None
    config_id: int
    created_at: datetime
    updated_at: datetime
    config: ConfigPublic | None = None


class DomainReference(ApiModel):
    """Cached pointer from a domain name to its configuration.

    Cached under the domain key when multilingual resolution is enabled; the
    localized configuration is cached separately per language.
    """

    id: int
    domain: str
    homepage: str | None = None
    config_id: int


class ResolvedDomain(DomainReference):
    """Lookup result: the domain with its (possibly localized) configuration."""

    config: LocalizedConfig


DomainsPublic = PaginatedResponse[DomainPublic]
