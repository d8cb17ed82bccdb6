"""Translation cache factory."""

from typing import Optional

from i18n_runtime.caching.base import CacheBackingStore, TranslationCache
from i18n_runtime.caching.external import ExternalCache
from i18n_runtime.caching.memory import InMemoryCache
from i18n_runtime.caching.redis_store import RedisBackingStore
from i18n_runtime.configuration import Settings, get_settings
from i18n_runtime.logging import get_module_logger

logger = get_module_logger()

MEMORY_BACKEND = "memory"
EXTERNAL_BACKEND = "external"


def create_translation_cache(
    settings: Optional[Settings] = None,
    backing_store: Optional[CacheBackingStore] = None,
) -> TranslationCache:
    """Create the shared translation cache described by settings.

    Args:
        settings: Runtime settings (uses process settings if None).
        backing_store: Store for the external backend. Supplying one selects
            the external backend regardless of configuration.

    Returns:
        Configured TranslationCache.

    Raises:
        ValueError: If the backend is unknown, or external without a store
            or ``REDIS_URL``.
    """
    settings = settings or get_settings()
    cache_settings = settings.cache
    backend = EXTERNAL_BACKEND if backing_store is not None else cache_settings.backend

    if backend == MEMORY_BACKEND:
        logger.info(
            "initialized_translation_cache",
            backend=backend,
            ttl_seconds=cache_settings.ttl_seconds,
            max_entries=cache_settings.max_entries,
        )
        return InMemoryCache(
            ttl_seconds=cache_settings.ttl_seconds,
            max_entries=cache_settings.max_entries,
        )

    if backend == EXTERNAL_BACKEND:
        if backing_store is None:
            if not cache_settings.redis_url:
                raise ValueError("External translation cache requires REDIS_URL")
            backing_store = RedisBackingStore.from_url(cache_settings.redis_url)
        logger.info("initialized_translation_cache", backend=backend)
        return ExternalCache(
            backing_store,
            prefix=cache_settings.external_prefix,
            ttl_seconds=cache_settings.external_ttl_seconds,
            timeout_seconds=cache_settings.backend_timeout_seconds,
        )

    raise ValueError(f"Unknown translation cache backend: {backend}")
