"""Cache store adapter over an external key-value service.

The adapter is a best-effort accelerator. From the caller's point of view
every operation succeeds: a lookup yields a value or None, a write or delete
simply returns. Transport failures, serialization failures and a disabled
store are all absorbed here, logged, and counted on the metrics collaborator.
"""

from dataclasses import dataclass, field
import json
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis

from domain_config.core.logging import get_logger

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


@dataclass
class CacheMetrics:
    """In-process hit/miss/error counters.

    Exporting these to a metrics backend is left to whoever owns the
    process; the store only increments them.
    """

    hits: int = 0
    misses: int = 0
    errors: dict[str, int] = field(default_factory=dict)

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def record_error(self, operation: str) -> None:
        self.errors[operation] = self.errors.get(operation, 0) + 1

    @property
    def error_count(self) -> int:
        return sum(self.errors.values())


class CacheStore:
    """get/set/delete against Redis that never raise to the caller.

    Values are stored as UTF-8 JSON. Pydantic models are dumped with their
    aliases so the cached document matches the HTTP payload.

    Attributes:
        default_ttl: TTL in seconds applied when set() gets none
        metrics: Counter sink for hits, misses and errors
    """

    def __init__(
        self,
        client: Redis | None,
        default_ttl: int,
        metrics: CacheMetrics | None = None,
    ):
        self._client = client
        self._reachable = client is not None
        self.default_ttl = default_ttl
        self.metrics = metrics or CacheMetrics()

    def is_enabled(self) -> bool:
        """Whether a client is configured and the last call reached it.

        Observability only; get/set/delete already degrade safely.
        """
        return self._client is not None and self._reachable

    async def get(self, key: str) -> Any | None:
        """Return the decoded JSON value for key, or None on miss or failure."""
        return self._count_lookup(key, await self._load(key))

    async def get_model(self, key: str, model: type[M]) -> M | None:
        """Like get(), validating the cached document into model.

        A document that no longer fits the model is a miss.
        """
        value = await self._load(key)
        if value is not None:
            try:
                value = model.model_validate(value)
            except PydanticValidationError as e:
                self._on_error("validate", key, e)
                value = None
        return self._count_lookup(key, value)

    async def _load(self, key: str) -> Any | None:
        if self._client is None:
            return None

        try:
            raw = await self._client.get(key)
        except Exception as e:
            self._on_error("get", key, e, transport=True)
            return None
        self._reachable = True

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except ValueError as e:
            self._on_error("decode", key, e)
            return None

    def _count_lookup(self, key: str, value: Any | None) -> Any | None:
        # A stored JSON null is indistinguishable from absence
        if value is None:
            self.metrics.record_miss()
            logger.debug("cache_miss", key=key)
        else:
            self.metrics.record_hit()
            logger.debug("cache_hit", key=key)
        return value

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        """Store value under key with a TTL. Failures are logged and dropped."""
        if self._client is None:
            return

        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl
        try:
            if isinstance(value, BaseModel):
                payload = value.model_dump_json(by_alias=True)
            else:
                payload = json.dumps(value, ensure_ascii=False, default=str)
        except (TypeError, ValueError) as e:
            self._on_error("encode", key, e)
            return

        try:
            await self._client.set(key, payload, ex=ttl)
        except Exception as e:
            self._on_error("set", key, e, transport=True)
            return
        self._reachable = True
        logger.debug("cache_set", key=key, ttl=ttl)

    async def delete(self, *keys: str) -> None:
        """Remove keys. Failures are logged and dropped."""
        if self._client is None or not keys:
            return

        try:
            await self._client.delete(*keys)
        except Exception as e:
            self._on_error("delete", ",".join(keys), e, transport=True)
            return
        self._reachable = True
        logger.debug("cache_deleted", keys=list(keys))

    def _on_error(
        self, operation: str, key: str, error: Exception, transport: bool = False
    ) -> None:
        if transport:
            self._reachable = False
        self.metrics.record_error(operation)
        logger.warning(
            "cache_operation_failed",
            operation=operation,
            key=key,
            error=str(error),
            error_type=type(error).__name__,
        )
