from collections import Counter
from datetime import UTC, datetime
from typing import Any

import pytest

from domain_config.cache import CacheStore
from domain_config.configs.models import Config, ConfigCreate
from domain_config.configs.service import ConfigService
from domain_config.core.exceptions import ResourceExistsError
from domain_config.domains.models import Domain, DomainCreate
from domain_config.domains.service import DomainResolutionService
from domain_config.i18n import LanguageConfig, LanguageNegotiator
from domain_config.translations.models import Translation

FIXED_TIME = datetime(2024, 1, 1, tzinfo=UTC)


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis (get/set/delete only)."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.data[key] = value
        self.ttls[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed


class FakeStore:
    """In-memory ConfigStore that counts every call by method name."""

    def __init__(self):
        self.configs: dict[int, Config] = {}
        self.domains: dict[int, Domain] = {}
        self.translations: dict[tuple[int, str], Translation] = {}
        self.calls: Counter[str] = Counter()
        self._next_id = 1

    def _new_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    # Seeding helpers (not part of the store interface)

    def add_config(self, **fields: Any) -> Config:
        config = Config(
            id=self._new_id(), created_at=FIXED_TIME, updated_at=FIXED_TIME, **fields
        )
        self.configs[config.id] = config
        return config

    def add_translation(
        self, config_id: int, language_code: str, title: str, **fields: Any
    ) -> Translation:
        translation = Translation(
            id=self._new_id(),
            config_id=config_id,
            language_code=language_code,
            title=title,
            author=fields.get("author", f"{title} author"),
            description=fields.get("description", f"{title} description"),
            keywords=fields.get("keywords", [title.lower()]),
        )
        self.translations[(config_id, language_code)] = translation
        return translation

    def add_domain(self, domain: str, config_id: int, homepage: str | None = None):
        db_domain = Domain(
            id=self._new_id(),
            domain=domain,
            homepage=homepage,
            config_id=config_id,
            created_at=FIXED_TIME,
            updated_at=FIXED_TIME,
        )
        self.domains[db_domain.id] = db_domain
        return db_domain

    # Domains

    async def get_domain(self, domain_id: int) -> Domain | None:
        self.calls["get_domain"] += 1
        return self.domains.get(domain_id)

    async def get_domain_by_name(self, name: str) -> Domain | None:
        self.calls["get_domain_by_name"] += 1
        return next((d for d in self.domains.values() if d.domain == name), None)

    async def list_domains(self, skip: int, limit: int) -> list[Domain]:
        self.calls["list_domains"] += 1
        rows = sorted(self.domains.values(), key=lambda d: d.id)
        return rows[skip : skip + limit]

    async def count_domains(self) -> int:
        self.calls["count_domains"] += 1
        return len(self.domains)

    async def list_domain_names_by_config(self, config_id: int) -> list[str]:
        self.calls["list_domain_names_by_config"] += 1
        return [d.domain for d in self.domains.values() if d.config_id == config_id]

    async def create_domain(self, domain_in: DomainCreate) -> Domain:
        self.calls["create_domain"] += 1
        if any(d.domain == domain_in.domain for d in self.domains.values()):
            raise ResourceExistsError("Domain", "domain", domain_in.domain)
        return self.add_domain(
            domain_in.domain, domain_in.config_id, domain_in.homepage
        )

    async def update_domain(
        self, domain_id: int, changes: dict[str, Any]
    ) -> Domain | None:
        self.calls["update_domain"] += 1
        db_domain = self.domains.get(domain_id)
        if db_domain is None:
            return None
        new_name = changes.get("domain")
        if new_name and any(
            d.domain == new_name and d.id != domain_id for d in self.domains.values()
        ):
            raise ResourceExistsError("Domain", "domain", new_name)
        for field, value in changes.items():
            setattr(db_domain, field, value)
        return db_domain

    async def delete_domain(self, domain_id: int) -> bool:
        self.calls["delete_domain"] += 1
        return self.domains.pop(domain_id, None) is not None

    # Configs

    async def get_config(self, config_id: int) -> Config | None:
        self.calls["get_config"] += 1
        return self.configs.get(config_id)

    async def list_configs(self, skip: int, limit: int) -> list[Config]:
        self.calls["list_configs"] += 1
        rows = sorted(self.configs.values(), key=lambda c: c.id)
        return rows[skip : skip + limit]

    async def count_configs(self) -> int:
        self.calls["count_configs"] += 1
        return len(self.configs)

    async def create_config(self, config_in: ConfigCreate) -> Config:
        self.calls["create_config"] += 1
        return self.add_config(**config_in.model_dump())

    async def update_config(
        self, config_id: int, changes: dict[str, Any]
    ) -> Config | None:
        self.calls["update_config"] += 1
        config = self.configs.get(config_id)
        if config is None:
            return None
        for field, value in changes.items():
            setattr(config, field, value)
        return config

    async def delete_config(self, config_id: int) -> bool:
        self.calls["delete_config"] += 1
        return self.configs.pop(config_id, None) is not None

    # Translations

    async def get_translation(
        self, config_id: int, language_code: str
    ) -> Translation | None:
        self.calls["get_translation"] += 1
        return self.translations.get((config_id, language_code))


@pytest.fixture
def language_config() -> LanguageConfig:
    return LanguageConfig(
        default_language="zh-cn",
        supported_languages=frozenset({"zh-cn", "en-us", "ja-jp"}),
    )


@pytest.fixture
def negotiator(language_config: LanguageConfig) -> LanguageNegotiator:
    return LanguageNegotiator(language_config)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def cache(redis: FakeRedis) -> CacheStore:
    return CacheStore(redis, default_ttl=3600)


@pytest.fixture
def example_store(store: FakeStore) -> FakeStore:
    """example.com with zh-cn and en-us translations; no ja-jp."""
    config = store.add_config(
        links={"home": "https://example.com"}, permissions={"public": True}
    )
    store.add_translation(config.id, "zh-cn", "示例", keywords=["示例"])
    store.add_translation(config.id, "en-us", "Example", keywords=["example"])
    store.add_domain("example.com", config.id, homepage="https://example.com")
    return store


@pytest.fixture
def domain_service(
    example_store: FakeStore, cache: CacheStore, negotiator: LanguageNegotiator
) -> DomainResolutionService:
    return DomainResolutionService(
        example_store,
        cache,
        negotiator,
        multilingual_enabled=True,
        max_page_size=100,
    )


@pytest.fixture
def config_service(
    example_store: FakeStore, domain_service: DomainResolutionService
) -> ConfigService:
    return ConfigService(example_store, domain_service, max_page_size=100)
