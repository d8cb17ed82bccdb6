"""Best-effort translation cache on top of a shared key/value store."""

import asyncio
import json
from types import MappingProxyType
from typing import Any, Awaitable, Dict, Optional, TypeVar

from i18n_runtime.caching.base import CacheBackingStore, TranslationCache
from i18n_runtime.exceptions import CacheBackendError
from i18n_runtime.logging import get_module_logger
from i18n_runtime.models import TranslationMap

logger = get_module_logger()

T = TypeVar("T")

DEFAULT_PREFIX = "i18n:translations:"
DEFAULT_TTL_SECONDS = 3600
DEFAULT_TIMEOUT_SECONDS = 1.0


class ExternalCache(TranslationCache):
    """Translation cache stored as JSON documents in an external store.

    Shared by every process pointing at the same store. Backend failures,
    timeouts and malformed documents are logged and treated as a miss
    (``get``), ``False`` (``has``) or a no-op (``set``/``invalidate``).

    Attributes:
        prefix: Prepended to the locale to form the store key.
        ttl_seconds: Lifetime passed to the store on every write.
        timeout_seconds: Upper bound on every store call.
    """

    def __init__(
        self,
        store: CacheBackingStore,
        prefix: str = DEFAULT_PREFIX,
        ttl_seconds: Optional[int] = DEFAULT_TTL_SECONDS,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.store = store
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds
        self.timeout_seconds = timeout_seconds
        logger.info(
            "initialized_external_translation_cache",
            prefix=prefix,
            ttl_seconds=ttl_seconds,
            timeout_seconds=timeout_seconds,
        )

    def key_for(self, locale: str) -> str:
        return f"{self.prefix}{locale}"

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise CacheBackendError(
                f"{operation} timed out after {self.timeout_seconds}s"
            ) from e
        except Exception as e:
            raise CacheBackendError(f"{operation} failed: {e}") from e

    async def get(self, locale: str) -> Optional[TranslationMap]:
        key = self.key_for(locale)
        try:
            raw = await self._call("get", self.store.get(key))
        except CacheBackendError as e:
            logger.warning("external_cache_get_error", key=key, error=str(e))
            return None

        if raw is None:
            logger.debug("external_cache_miss", key=key)
            return None

        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("external_cache_malformed_entry", key=key, error=str(e))
            return None

        if not isinstance(data, dict):
            logger.warning(
                "external_cache_malformed_entry",
                key=key,
                error=f"expected object, got {type(data).__name__}",
            )
            return None

        logger.debug("external_cache_hit", key=key)
        return MappingProxyType(data)

    async def set(self, locale: str, translations: TranslationMap) -> None:
        key = self.key_for(locale)
        try:
            value = json.dumps(dict(translations))
        except (TypeError, ValueError) as e:
            logger.error("external_cache_serialization_error", key=key, error=str(e))
            return

        try:
            await self._call("set", self.store.set(key, value, self.ttl_seconds))
        except CacheBackendError as e:
            logger.warning("external_cache_set_error", key=key, error=str(e))

    async def has(self, locale: str) -> bool:
        key = self.key_for(locale)
        try:
            return await self._call("get", self.store.get(key)) is not None
        except CacheBackendError as e:
            logger.warning("external_cache_has_error", key=key, error=str(e))
            return False

    async def invalidate(self, locale: Optional[str] = None) -> None:
        if locale is not None:
            key = self.key_for(locale)
            try:
                await self._call("delete", self.store.delete(key))
            except CacheBackendError as e:
                logger.warning("external_cache_invalidate_error", key=key, error=str(e))
            return

        try:
            keys = await self._call("keys", self.store.keys(f"{self.prefix}*"))
        except CacheBackendError as e:
            if isinstance(e.__cause__, NotImplementedError):
                logger.info("external_cache_invalidate_all_unsupported", prefix=self.prefix)
            else:
                logger.warning(
                    "external_cache_invalidate_error", prefix=self.prefix, error=str(e)
                )
            return

        if not keys:
            return

        try:
            await self._call("delete", self.store.delete(*keys))
            logger.info("external_cache_cleared", entries_removed=len(keys))
        except CacheBackendError as e:
            logger.warning(
                "external_cache_invalidate_error", prefix=self.prefix, error=str(e)
            )

    def get_stats(self) -> Dict[str, Any]:
        return {
            "backend": "external",
            "store": type(self.store).__name__,
            "prefix": self.prefix,
            "ttl_seconds": self.ttl_seconds,
            "timeout_seconds": self.timeout_seconds,
        }
