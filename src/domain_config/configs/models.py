from datetime import datetime
from typing import Any

from sqlalchemy import JSON
from sqlmodel import Field, SQLModel

from domain_config.core.base_models import (
    ApiModel,
    PaginatedResponse,
    TimestampedTable,
)

# Opaque JSON object, stored as-is
JsonObject = dict[str, Any]


class ConfigBase(SQLModel):
    links: JsonObject | None = Field(default=None, sa_type=JSON)
    permissions: JsonObject | None = Field(default=None, sa_type=JSON)


class Config(ConfigBase, TimestampedTable, table=True):
    """Language-independent configuration shared by one or more domains."""

    __tablename__ = "configs"


class ConfigCreate(ApiModel):
    links: JsonObject | None = None
    permissions: JsonObject | None = None


class ConfigUpdate(ApiModel):
    links: JsonObject | None = None
    permissions: JsonObject | None = None


class ConfigPublic(ApiModel):
    id: int
    links: JsonObject | None = None
    permissions: JsonObject | None = None
    created_at: datetime
    updated_at: datetime


class LocalizedConfig(ApiModel):
    """Base configuration merged with one translation.

    `language` is the language actually served, which can differ from the
    one requested when the resolver fell back. It is None when multilingual
    resolution is disabled and no translation was merged.
    """

    id: int
    links: JsonObject | None = None
    permissions: JsonObject | None = None
    title: str | None = None
    author: str | None = None
    description: str | None = None
    keywords: list[str] | None = None
    language: str | None = None
    created_at: datetime
    updated_at: datetime


ConfigsPublic = PaginatedResponse[ConfigPublic]
