"""Base models and mixins shared by the table and response schemas.

Usage:
    - Database models (table=True) inherit from the composed base classes
    - Response schemas inherit from ApiModel so JSON uses camelCase keys
    - List responses use PaginatedResponse[T]

Example:
    class Domain(DomainBase, TimestampedTable, table=True):
        ...
"""

from datetime import UTC, datetime
import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel

from domain_config.core.exceptions import ValidationError

T = TypeVar("T")

# Largest row offset a signed 64-bit OFFSET accepts
MAX_ROW_OFFSET = 2**63 - 1


def utcnow() -> datetime:
    return datetime.now(UTC)


class IntPrimaryKeyMixin(SQLModel):
    """Auto-increment integer primary key."""

    id: int | None = Field(default=None, primary_key=True)


class TimestampMixin(SQLModel):
    """Created/updated timestamps for audit trail."""

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TimestampedTable(IntPrimaryKeyMixin, TimestampMixin):
    """Base for tables with an integer id and timestamps.

    Use for: Config, Translation, Domain
    """

    pass


class ApiModel(BaseModel):
    """Base for payloads leaving the service (HTTP bodies and cache values).

    Attributes are snake_case in Python and camelCase on the wire; both
    spellings are accepted on input so cached JSON round-trips.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def page_offset(page: int, page_size: int, max_page_size: int) -> int:
    """Validate 1-based page parameters and return the row offset.

    Raises:
        ValidationError: Unless page >= 1 and 1 <= page_size <= max_page_size,
            or if the resulting offset exceeds MAX_ROW_OFFSET.
    """
    if page < 1:
        raise ValidationError("page must be at least 1", field="page", value=page)
    if not 1 <= page_size <= max_page_size:
        raise ValidationError(
            f"pageSize must be between 1 and {max_page_size}",
            field="pageSize",
            value=page_size,
        )
    offset = (page - 1) * page_size
    if offset > MAX_ROW_OFFSET:
        raise ValidationError("page is out of range", field="page", value=page)
    return offset


class PaginationMeta(ApiModel):
    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, page_size: int, total: int) -> "PaginationMeta":
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size),
        )


class PaginatedResponse(ApiModel, Generic[T]):
    """Standard paginated response wrapper.

    Example:
        @router.get("/domains", response_model=PaginatedResponse[DomainPublic])
        async def list_domains(...):
            return await service.list_domains(page, page_size)
    """

    data: list[T]
    pagination: PaginationMeta
