"""Domain resolution: cache-aside lookups and write-invalidate mutations.

Cache layout:
    Multilingual disabled:
        domain:config:<name>          -> ResolvedDomain (base config inline)
    Multilingual enabled:
        domain:config:<name>          -> DomainReference
        config:<id>:lang:<language>   -> LocalizedConfig

Entries are only written under the name of a domain that exists in the
store, so deleting that domain's own key is enough to invalidate it.
Store writes always precede invalidation.
"""

from typing import TYPE_CHECKING

from domain_config.cache import (
    CacheStore,
    config_language_cache_key,
    domain_cache_key,
)
from domain_config.configs.merge import merge_config
from domain_config.configs.models import Config, ConfigPublic, LocalizedConfig
from domain_config.core.base_models import PaginationMeta, page_offset
from domain_config.core.exceptions import (
    DataIntegrityError,
    ResourceExistsError,
    ResourceNotFoundError,
    ValidationError,
)
from domain_config.core.logging import get_logger
from domain_config.core.tasks import gather_with_errors, run_to_completion
from domain_config.domains.matching import (
    candidate_names,
    extract_host,
    is_valid_host,
)
from domain_config.domains.models import (
    Domain,
    DomainCreate,
    DomainPublic,
    DomainReference,
    DomainsPublic,
    DomainUpdate,
    ResolvedDomain,
)
from domain_config.i18n.negotiator import LanguageNegotiator
from domain_config.translations.resolver import TranslationResolver

if TYPE_CHECKING:
    from domain_config.store import ConfigStore

logger = get_logger(__name__)

# Columns that cannot be cleared by an update
_REQUIRED_FIELDS = ("domain", "config_id")


def _to_public(db_domain: Domain, config: Config | None = None) -> DomainPublic:
    public = DomainPublic.model_validate(db_domain)
    if config is not None:
        public.config = ConfigPublic.model_validate(config)
    return public


class DomainResolutionService:
    """Resolve domains to localized configurations and manage domain records.

    Attributes:
        store: Persistent storage for domains, configs and translations
        cache: Best-effort cache adapter; never raises
        negotiator: Picks the response language per request
        multilingual_enabled: Whether translations are merged into lookups
    """

    def __init__(
        self,
        store: "ConfigStore",
        cache: CacheStore,
        negotiator: LanguageNegotiator,
        *,
        multilingual_enabled: bool = True,
        max_page_size: int = 100,
        cache_ttl: int | None = None,
    ):
        self.store = store
        self.cache = cache
        self.negotiator = negotiator
        self.resolver = TranslationResolver(store, negotiator.config)
        self.multilingual_enabled = multilingual_enabled
        self.max_page_size = max_page_size
        self.cache_ttl = cache_ttl

    # Lookups

    async def resolve_domain(
        self,
        name: str,
        lang: str | None = None,
        accept_language: str | None = None,
    ) -> ResolvedDomain:
        """Resolve a domain name (or URL) to its configuration.

        The host is tried first, then its root domain.

        Args:
            name: Domain name or URL as supplied by the client
            lang: Explicit language override
            accept_language: Raw Accept-Language header value

        Raises:
            ValidationError: If the name has no usable host or lang is
                malformed.
            ResourceNotFoundError: If no candidate matches a domain, or no
                translation exists in the negotiated or default language.
            DataIntegrityError: If the domain points at a missing config.
        """
        host = extract_host(name)
        if not is_valid_host(host):
            raise ValidationError(f"Invalid domain name: {name!r}", field="domain")

        if not self.multilingual_enabled:
            for candidate in candidate_names(host):
                resolved = await self._resolve_base(candidate)
                if resolved is not None:
                    return resolved
            raise ResourceNotFoundError("Domain", host)

        language = self.negotiator.negotiate(lang, accept_language)
        for candidate in candidate_names(host):
            resolved = await self._resolve_localized(candidate, language)
            if resolved is not None:
                return resolved
        raise ResourceNotFoundError("Domain", host)

    async def _resolve_base(self, name: str) -> ResolvedDomain | None:
        key = domain_cache_key(name)
        cached = await self.cache.get_model(key, ResolvedDomain)
        if cached is not None:
            return cached

        db_domain = await self.store.get_domain_by_name(name)
        if db_domain is None:
            return None

        config = await self._config_for(db_domain)
        resolved = ResolvedDomain(
            id=db_domain.id,
            domain=db_domain.domain,
            homepage=db_domain.homepage,
            config_id=db_domain.config_id,
            config=merge_config(config),
        )
        await self._cache_set(key, resolved)
        return resolved

    async def _resolve_localized(
        self, name: str, language: str
    ) -> ResolvedDomain | None:
        key = domain_cache_key(name)
        reference = await self.cache.get_model(key, DomainReference)
        from_store = False
        if reference is None:
            db_domain = await self.store.get_domain_by_name(name)
            if db_domain is None:
                return None
            reference = DomainReference.model_validate(db_domain)
            from_store = True

        config = await self._localized_config(reference.config_id, language)
        if config is None:
            raise DataIntegrityError(
                "Domain references a missing config",
                domain=reference.domain,
                config_id=reference.config_id,
            )

        if from_store:
            await self._cache_set(key, reference)

        return ResolvedDomain(**reference.model_dump(), config=config)

    async def _localized_config(
        self, config_id: int, language: str
    ) -> LocalizedConfig | None:
        """Cache-aside read of a merged config; None if the config is gone."""
        key = config_language_cache_key(config_id, language)
        cached = await self.cache.get_model(key, LocalizedConfig)
        if cached is not None:
            return cached

        config = await self.store.get_config(config_id)
        if config is None:
            return None

        resolved = await self.resolver.resolve(config_id, language)
        localized = merge_config(config, resolved)
        await self._cache_set(key, localized)
        return localized

    async def _config_for(self, db_domain: Domain) -> Config:
        config = await self.store.get_config(db_domain.config_id)
        if config is None:
            logger.error(
                "domain_config_missing",
                domain=db_domain.domain,
                config_id=db_domain.config_id,
            )
            raise DataIntegrityError(
                "Domain references a missing config",
                domain=db_domain.domain,
                config_id=db_domain.config_id,
            )
        return config

    async def get_domain(self, domain_id: int) -> DomainPublic:
        """Administrative read of a domain with its base config. Uncached."""
        db_domain = await self.store.get_domain(domain_id)
        if db_domain is None:
            raise ResourceNotFoundError("Domain", domain_id)
        return _to_public(db_domain, await self._config_for(db_domain))

    async def get_config(
        self,
        config_id: int,
        lang: str | None = None,
        accept_language: str | None = None,
    ) -> LocalizedConfig:
        """Read a configuration by id, localized when multilingual is on."""
        if not self.multilingual_enabled:
            config = await self.store.get_config(config_id)
            if config is None:
                raise ResourceNotFoundError("Config", config_id)
            return merge_config(config)

        language = self.negotiator.negotiate(lang, accept_language)
        localized = await self._localized_config(config_id, language)
        if localized is None:
            raise ResourceNotFoundError("Config", config_id)
        return localized

    async def list_domains(self, page: int, page_size: int) -> DomainsPublic:
        """One page of domains ordered by id, with totals. Uncached.

        Raises:
            ValidationError: If page < 1 or page_size is outside
                [1, max_page_size].
        """
        skip = page_offset(page, page_size, self.max_page_size)
        rows, total = await gather_with_errors(
            self.store.list_domains(skip, page_size),
            self.store.count_domains(),
        )
        return DomainsPublic(
            data=[_to_public(row) for row in rows],
            pagination=PaginationMeta.build(page, page_size, total),
        )

    # Mutations

    async def create_domain(self, domain_in: DomainCreate) -> DomainPublic:
        """Create a domain. The cache is not warmed.

        Raises:
            ResourceExistsError: If the name is already taken.
            ResourceNotFoundError: If the referenced config does not exist.
        """
        if await self.store.get_domain_by_name(domain_in.domain) is not None:
            raise ResourceExistsError("Domain", "domain", domain_in.domain)

        config = await self.store.get_config(domain_in.config_id)
        if config is None:
            raise ResourceNotFoundError("Config", domain_in.config_id)

        db_domain = await self.store.create_domain(domain_in)
        logger.info(
            "domain_created",
            domain_id=db_domain.id,
            domain=db_domain.domain,
            config_id=db_domain.config_id,
        )
        return _to_public(db_domain, config)

    async def update_domain(
        self, domain_id: int, domain_in: DomainUpdate
    ) -> DomainPublic:
        """Apply a partial update, then drop the old and new name keys.

        Raises:
            ResourceNotFoundError: If the domain or a new config is missing.
            ResourceExistsError: If renaming onto an existing name.
        """
        existing = await self.store.get_domain(domain_id)
        if existing is None:
            raise ResourceNotFoundError("Domain", domain_id)
        old_name = existing.domain

        changes = {
            field: value
            for field, value in domain_in.model_dump(exclude_unset=True).items()
            if value is not None or field not in _REQUIRED_FIELDS
        }

        new_name = changes.get("domain")
        if new_name is not None and new_name != old_name:
            other = await self.store.get_domain_by_name(new_name)
            if other is not None and other.id != domain_id:
                raise ResourceExistsError("Domain", "domain", new_name)

        config_id = changes.get("config_id", existing.config_id)
        config = await self.store.get_config(config_id)
        if config is None:
            raise ResourceNotFoundError("Config", config_id)

        updated = await self.store.update_domain(domain_id, changes)
        if updated is None:
            raise ResourceNotFoundError("Domain", domain_id)

        await self._invalidate(
            *dict.fromkeys(
                (domain_cache_key(old_name), domain_cache_key(updated.domain))
            )
        )
        logger.info(
            "domain_updated",
            domain_id=domain_id,
            fields=sorted(changes),
            old_domain=old_name,
            domain=updated.domain,
        )
        return _to_public(updated, config)

    async def delete_domain(self, domain_id: int) -> None:
        """Delete a domain, then drop its cache key.

        Raises:
            ResourceNotFoundError: If the domain does not exist.
        """
        existing = await self.store.get_domain(domain_id)
        if existing is None:
            raise ResourceNotFoundError("Domain", domain_id)

        if not await self.store.delete_domain(domain_id):
            raise ResourceNotFoundError("Domain", domain_id)

        await self._invalidate(domain_cache_key(existing.domain))
        logger.info("domain_deleted", domain_id=domain_id, domain=existing.domain)

    async def invalidate_config(self, config_id: int) -> None:
        """Drop every cached view of a configuration.

        Covers the per-language merged entries for all supported languages
        and the name keys of every domain pointing at the configuration.
        """
        languages = sorted(self.negotiator.config.supported_languages)
        names = await self.store.list_domain_names_by_config(config_id)
        keys = [config_language_cache_key(config_id, code) for code in languages]
        keys.extend(domain_cache_key(name) for name in names)
        await self._invalidate(*keys)

    # Cache writes

    async def _cache_set(
        self, key: str, value: DomainReference | LocalizedConfig
    ) -> None:
        await run_to_completion(
            self.cache.set(key, value, self.cache_ttl), task_name="cache_set"
        )

    async def _invalidate(self, *keys: str) -> None:
        await run_to_completion(self.cache.delete(*keys), task_name="cache_delete")
        logger.debug("cache_invalidated", keys=list(keys))
