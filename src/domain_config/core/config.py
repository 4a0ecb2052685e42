from functools import lru_cache
from typing import Annotated, Any, Literal

from pydantic import (
    AnyUrl,
    BeforeValidator,
    ValidationInfo,
    computed_field,
    field_validator,
)
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def normalize_language_code(code: str) -> str:
    """Normalize a language tag to lowercase, hyphen-separated form.

    - "zh_CN" -> "zh-cn"
    - "EN-us" -> "en-us"
    """
    return code.strip().lower().replace("_", "-")


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    if isinstance(v, list | str):
        return v
    raise ValueError(v)


def parse_languages(v: Any) -> list[str]:
    if isinstance(v, str):
        return [normalize_language_code(i) for i in v.split(",") if i.strip()]
    if isinstance(v, list | tuple):
        return [normalize_language_code(str(i)) for i in v if str(i).strip()]
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Domain Config API"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    CORS_ORIGINS: Annotated[list[AnyUrl] | str, BeforeValidator(parse_cors)] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        """Return all CORS origins as strings."""
        return [str(origin).rstrip("/") for origin in self.CORS_ORIGINS]

    # Full URL wins over the POSTGRES_* parts when set (used by tests and sqlite)
    DATABASE_URL: str | None = None

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "changethis"
    POSTGRES_DB: str = "domain_config"

    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Build the async SQLAlchemy connection URI."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return str(
            MultiHostUrl.build(
                scheme="postgresql+psycopg",
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD,
                host=self.POSTGRES_SERVER,
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,
            )
        )

    # Redis cache
    REDIS_ENABLED: bool = False
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_SOCKET_TIMEOUT_SECONDS: float = 1.0
    CACHE_TTL_SECONDS: int = 3600

    @field_validator("CACHE_TTL_SECONDS")
    @classmethod
    def validate_cache_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("CACHE_TTL_SECONDS must be a positive number of seconds")
        return v

    # Multilingual content
    MULTILINGUAL_ENABLED: bool = True
    DEFAULT_LANGUAGE: str = "zh-cn"
    SUPPORTED_LANGUAGES: Annotated[
        list[str], NoDecode, BeforeValidator(parse_languages)
    ] = [
        "zh-cn",
        "en-us",
        "ja-jp",
    ]

    @field_validator("DEFAULT_LANGUAGE", mode="after")
    @classmethod
    def validate_default_language(cls, v: str) -> str:
        normalized = normalize_language_code(v)
        if not normalized:
            raise ValueError("DEFAULT_LANGUAGE must not be empty")
        return normalized

    @field_validator("SUPPORTED_LANGUAGES", mode="after")
    @classmethod
    def include_default_language(cls, v: list[str], info: ValidationInfo) -> list[str]:
        """The default language is always part of the supported set."""
        default = info.data.get("DEFAULT_LANGUAGE") if info.data else None
        languages = list(dict.fromkeys(v))
        if default and default not in languages:
            languages.insert(0, default)
        return languages

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
