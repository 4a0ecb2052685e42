"""Redis-backed cache-aside support: client lifecycle, key formats, adapter."""

from domain_config.cache.client import create_redis_client, redis_lifespan
from domain_config.cache.keys import config_language_cache_key, domain_cache_key
from domain_config.cache.store import CacheMetrics, CacheStore

__all__ = [
    "CacheMetrics",
    "CacheStore",
    "config_language_cache_key",
    "create_redis_client",
    "domain_cache_key",
    "redis_lifespan",
]
