"""Translation map caching.

Three tiers sit between a translation scope and storage:

- ``InMemoryCache``: bounded LRU with per-entry TTL, shared within a process.
- ``ExternalCache``: best-effort JSON cache in a shared store such as Redis.
- ``RequestScopedCache``: one instance per unit of work, deduplicating
  concurrent loads of the same locale.

Usage:

    from i18n_runtime.caching import (
        RequestScopedCache,
        TranslationMapLoader,
        create_translation_cache,
    )

    loader = TranslationMapLoader(storage, create_translation_cache())
    request_cache = RequestScopedCache()
    translations = await loader.load("pt-BR", request_cache)
"""

from i18n_runtime.caching.base import CacheBackingStore, TranslationCache
from i18n_runtime.caching.external import ExternalCache
from i18n_runtime.caching.factory import create_translation_cache
from i18n_runtime.caching.loader import TranslationMapLoader
from i18n_runtime.caching.memory import InMemoryCache
from i18n_runtime.caching.redis_store import RedisBackingStore
from i18n_runtime.caching.scoped import RequestScopedCache

__all__ = [
    "TranslationCache",
    "CacheBackingStore",
    "InMemoryCache",
    "ExternalCache",
    "RedisBackingStore",
    "RequestScopedCache",
    "TranslationMapLoader",
    "create_translation_cache",
]
