import asyncio
import json

import pytest

from domain_config.cache import CacheStore, config_language_cache_key, domain_cache_key
from domain_config.core.exceptions import (
    DataIntegrityError,
    ErrorKind,
    ResourceExistsError,
    ResourceNotFoundError,
    ValidationError,
)
from domain_config.domains import DomainCreate, DomainUpdate
from domain_config.domains.service import DomainResolutionService


def store_reads(store) -> int:
    return sum(
        store.calls[name]
        for name in ("get_domain_by_name", "get_config", "get_translation")
    )


class TestResolveDomain:
    @pytest.mark.asyncio
    async def test_accept_language_selects_translation(self, domain_service):
        resolved = await domain_service.resolve_domain(
            "example.com", accept_language="en-US;q=0.9"
        )

        assert resolved.domain == "example.com"
        assert resolved.homepage == "https://example.com"
        assert resolved.config.title == "Example"
        assert resolved.config.language == "en-us"

    @pytest.mark.asyncio
    async def test_no_header_serves_default_language(self, domain_service):
        resolved = await domain_service.resolve_domain("example.com")

        assert resolved.config.title == "示例"
        assert resolved.config.language == "zh-cn"

    @pytest.mark.asyncio
    async def test_missing_translation_falls_back(self, domain_service, redis):
        resolved = await domain_service.resolve_domain("example.com", lang="ja-JP")

        assert resolved.config.title == "示例"
        assert resolved.config.language == "zh-cn"
        # Cached under the negotiated language, carrying the served one
        cached = json.loads(redis.data[config_language_cache_key(1, "ja-jp")])
        assert cached["language"] == "zh-cn"

    @pytest.mark.asyncio
    async def test_second_lookup_is_served_from_cache(
        self, domain_service, example_store
    ):
        first = await domain_service.resolve_domain("example.com", lang="en-us")
        reads = store_reads(example_store)
        assert example_store.calls["get_domain_by_name"] == 1

        second = await domain_service.resolve_domain("example.com", lang="en-us")

        assert second == first
        assert store_reads(example_store) == reads
        assert example_store.calls["get_domain_by_name"] == 1

    @pytest.mark.asyncio
    async def test_new_language_reuses_cached_domain_reference(
        self, domain_service, example_store
    ):
        await domain_service.resolve_domain("example.com", lang="en-us")
        resolved = await domain_service.resolve_domain("example.com", lang="zh-cn")

        assert resolved.config.title == "示例"
        assert example_store.calls["get_domain_by_name"] == 1
        assert example_store.calls["get_config"] == 2

    @pytest.mark.asyncio
    async def test_url_input_and_root_domain_fallback(
        self, domain_service, example_store, redis
    ):
        resolved = await domain_service.resolve_domain(
            "https://WWW.Example.com:8443/about?x=1"
        )

        assert resolved.domain == "example.com"
        assert example_store.calls["get_domain_by_name"] == 2
        # Only the matched domain is cached
        assert domain_cache_key("example.com") in redis.data
        assert domain_cache_key("www.example.com") not in redis.data

    @pytest.mark.asyncio
    async def test_unknown_domain_is_not_found(self, domain_service):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            await domain_service.resolve_domain("unknown.org")
        assert exc_info.value.kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_invalid_name_is_rejected(self, domain_service):
        with pytest.raises(ValidationError):
            await domain_service.resolve_domain("https:///")

    @pytest.mark.asyncio
    async def test_malformed_lang_is_rejected(self, domain_service):
        with pytest.raises(ValidationError):
            await domain_service.resolve_domain("example.com", lang="??")

    @pytest.mark.asyncio
    async def test_missing_config_is_integrity_fault(
        self, domain_service, example_store
    ):
        example_store.add_domain("orphan.com", config_id=999)

        with pytest.raises(DataIntegrityError) as exc_info:
            await domain_service.resolve_domain("orphan.com")
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_works_without_cache(self, example_store, negotiator):
        service = DomainResolutionService(
            example_store, CacheStore(None, default_ttl=60), negotiator
        )

        for _ in range(2):
            resolved = await service.resolve_domain("example.com", lang="en-us")
            assert resolved.config.title == "Example"
        assert example_store.calls["get_domain_by_name"] == 2


class TestSingleLanguageMode:
    @pytest.fixture
    def service(self, example_store, cache, negotiator):
        return DomainResolutionService(
            example_store, cache, negotiator, multilingual_enabled=False
        )

    @pytest.mark.asyncio
    async def test_base_config_without_translation(self, service, example_store):
        resolved = await service.resolve_domain("example.com", lang="en-us")

        assert resolved.config.links == {"home": "https://example.com"}
        assert resolved.config.title is None
        assert resolved.config.language is None
        assert example_store.calls["get_translation"] == 0

    @pytest.mark.asyncio
    async def test_whole_payload_cached_under_domain_key(
        self, service, example_store, redis
    ):
        first = await service.resolve_domain("example.com")
        second = await service.resolve_domain("example.com")

        assert second == first
        assert example_store.calls["get_domain_by_name"] == 1
        assert example_store.calls["get_config"] == 1
        assert "config" in json.loads(redis.data[domain_cache_key("example.com")])


class TestGetById:
    @pytest.mark.asyncio
    async def test_get_domain_includes_base_config(self, domain_service):
        domain = await domain_service.get_domain(4)

        assert domain.domain == "example.com"
        assert domain.config is not None
        assert domain.config.id == 1

    @pytest.mark.asyncio
    async def test_get_domain_not_found(self, domain_service):
        with pytest.raises(ResourceNotFoundError):
            await domain_service.get_domain(404)

    @pytest.mark.asyncio
    async def test_get_config_localized_and_cached(
        self, domain_service, example_store
    ):
        first = await domain_service.get_config(1, accept_language="en-US")
        second = await domain_service.get_config(1, accept_language="en-US")

        assert first.title == "Example"
        assert second == first
        assert example_store.calls["get_config"] == 1

    @pytest.mark.asyncio
    async def test_get_config_not_found(self, domain_service):
        with pytest.raises(ResourceNotFoundError):
            await domain_service.get_config(999)


class TestListDomains:
    @pytest.mark.asyncio
    async def test_pagination_totals(self, domain_service, example_store):
        for i in range(4):
            example_store.add_domain(f"site{i}.example.org", config_id=1)

        page = await domain_service.list_domains(page=2, page_size=2)

        assert [d.domain for d in page.data] == [
            "site1.example.org",
            "site2.example.org",
        ]
        assert page.pagination.total == 5
        assert page.pagination.total_pages == 3

    @pytest.mark.asyncio
    async def test_page_beyond_end_is_empty(self, domain_service):
        page = await domain_service.list_domains(page=5, page_size=10)

        assert page.data == []
        assert page.pagination.total == 1
        assert page.pagination.total_pages == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("page", "page_size"), [(0, 10), (1, 0), (1, 101)])
    async def test_invalid_page_parameters(self, domain_service, page, page_size):
        with pytest.raises(ValidationError):
            await domain_service.list_domains(page=page, page_size=page_size)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page", [10**18, 2**63 // 100 + 2])
    async def test_page_past_representable_offset(self, domain_service, page):
        with pytest.raises(ValidationError) as exc_info:
            await domain_service.list_domains(page=page, page_size=100)

        assert exc_info.value.details["field"] == "page"
        assert exc_info.value.status_code == 422
        assert domain_service.store.calls["list_domains"] == 0

    @pytest.mark.asyncio
    async def test_pagination_serializes_camel_case(self, domain_service):
        page = await domain_service.list_domains(page=1, page_size=20)
        body = page.model_dump(by_alias=True)

        assert body["pagination"] == {
            "page": 1,
            "pageSize": 20,
            "total": 1,
            "totalPages": 1,
        }
        assert body["data"][0]["configId"] == 1


class TestMutations:
    @pytest.mark.asyncio
    async def test_create_then_read(self, domain_service, redis):
        created = await domain_service.create_domain(
            DomainCreate(domain="New.Example.org", homepage="https://n.org", config_id=1)
        )

        assert created.domain == "new.example.org"
        assert created.config.id == 1
        # Creation does not warm the cache
        assert domain_cache_key("new.example.org") not in redis.data

        resolved = await domain_service.resolve_domain("new.example.org")
        assert resolved.id == created.id
        assert resolved.homepage == "https://n.org"
        assert resolved.config_id == 1

    @pytest.mark.asyncio
    async def test_create_duplicate_conflicts(self, domain_service):
        with pytest.raises(ResourceExistsError) as exc_info:
            await domain_service.create_domain(
                DomainCreate(domain="example.com", config_id=1)
            )
        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_concurrent_creates_yield_one_conflict(
        self, domain_service, example_store
    ):
        payload = DomainCreate(domain="race.example.org", config_id=1)

        results = await asyncio.gather(
            domain_service.create_domain(payload),
            domain_service.create_domain(payload),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], ResourceExistsError)
        names = [d.domain for d in example_store.domains.values()]
        assert names.count("race.example.org") == 1

    @pytest.mark.asyncio
    async def test_create_with_unknown_config(self, domain_service):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            await domain_service.create_domain(
                DomainCreate(domain="a.example.org", config_id=42)
            )
        assert exc_info.value.error_code == "CONFIG_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_update_invalidates_cached_lookup(self, domain_service, redis):
        await domain_service.resolve_domain("example.com")
        assert domain_cache_key("example.com") in redis.data

        await domain_service.update_domain(
            4, DomainUpdate(homepage="https://new.example.com")
        )

        assert domain_cache_key("example.com") not in redis.data
        resolved = await domain_service.resolve_domain("example.com")
        assert resolved.homepage == "https://new.example.com"

    @pytest.mark.asyncio
    async def test_rename_invalidates_old_and_new_keys(
        self, domain_service, example_store, redis
    ):
        await domain_service.resolve_domain("example.com")
        redis.data[domain_cache_key("example.net")] = "{}"

        updated = await domain_service.update_domain(
            4, DomainUpdate(domain="example.net")
        )

        assert updated.domain == "example.net"
        assert domain_cache_key("example.com") not in redis.data
        assert domain_cache_key("example.net") not in redis.data
        with pytest.raises(ResourceNotFoundError):
            await domain_service.resolve_domain("example.com")

    @pytest.mark.asyncio
    async def test_rename_onto_existing_name_conflicts(
        self, domain_service, example_store
    ):
        other = example_store.add_domain("other.org", config_id=1)

        with pytest.raises(ResourceExistsError):
            await domain_service.update_domain(
                other.id, DomainUpdate(domain="example.com")
            )

    @pytest.mark.asyncio
    async def test_update_missing_domain(self, domain_service):
        with pytest.raises(ResourceNotFoundError):
            await domain_service.update_domain(404, DomainUpdate(homepage=None))

    @pytest.mark.asyncio
    async def test_update_to_unknown_config(self, domain_service):
        with pytest.raises(ResourceNotFoundError):
            await domain_service.update_domain(4, DomainUpdate(config_id=77))

    @pytest.mark.asyncio
    async def test_delete_invalidates(self, domain_service, example_store, redis):
        await domain_service.resolve_domain("example.com")

        await domain_service.delete_domain(4)

        assert domain_cache_key("example.com") not in redis.data
        assert 4 not in example_store.domains
        with pytest.raises(ResourceNotFoundError):
            await domain_service.resolve_domain("example.com")

    @pytest.mark.asyncio
    async def test_delete_missing_domain(self, domain_service):
        with pytest.raises(ResourceNotFoundError):
            await domain_service.delete_domain(404)

    @pytest.mark.asyncio
    async def test_delete_succeeds_when_cache_is_down(self, example_store, negotiator):
        class BrokenRedis:
            async def delete(self, *keys):
                raise ConnectionError("cache down")

        service = DomainResolutionService(
            example_store, CacheStore(BrokenRedis(), default_ttl=60), negotiator
        )

        await service.delete_domain(4)

        assert 4 not in example_store.domains
        assert service.cache.metrics.errors == {"delete": 1}

    @pytest.mark.asyncio
    async def test_invalidate_config_drops_all_views(self, domain_service, redis):
        for lang in ("zh-cn", "en-us", "ja-jp"):
            await domain_service.resolve_domain("example.com", lang=lang)
        assert len(redis.data) == 4

        await domain_service.invalidate_config(1)

        assert redis.data == {}


@pytest.mark.asyncio
async def test_cache_write_survives_cancelled_request(example_store, negotiator):
    release = asyncio.Event()

    class SlowRedis:
        def __init__(self):
            self.data = {}

        async def get(self, key):
            return None

        async def set(self, key, value, ex=None):
            await release.wait()
            self.data[key] = value

        async def delete(self, *keys):
            return 0

    redis = SlowRedis()
    service = DomainResolutionService(
        example_store, CacheStore(redis, default_ttl=60), negotiator
    )

    request = asyncio.create_task(service.resolve_domain("example.com"))
    await asyncio.sleep(0.01)
    request.cancel()
    with pytest.raises(asyncio.CancelledError):
        await request

    release.set()
    await asyncio.sleep(0.01)
    assert config_language_cache_key(1, "zh-cn") in redis.data
