from sqlalchemy import JSON, UniqueConstraint
from sqlmodel import Field

from domain_config.core.base_models import TimestampedTable


class Translation(TimestampedTable, table=True):
    """Language-dependent fields of a configuration.

    At most one row per (config_id, language_code).
    """

    __tablename__ = "translations"
    __table_args__ = (
        UniqueConstraint("config_id", "language_code", name="unique_config_language"),
    )

    config_id: int = Field(
        foreign_key="configs.id", nullable=False, ondelete="CASCADE", index=True
    )
    language_code: str = Field(max_length=16, index=True)
    title: str = Field(max_length=200)
    author: str = Field(max_length=100)
    description: str = Field(max_length=1000)
    keywords: list[str] = Field(default_factory=list, sa_type=JSON)
