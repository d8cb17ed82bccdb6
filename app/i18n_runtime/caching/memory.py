"""Bounded in-process translation cache with per-entry expiry."""

import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional, Tuple

from i18n_runtime.caching.base import TranslationCache
from i18n_runtime.logging import get_module_logger
from i18n_runtime.models import TranslationMap

logger = get_module_logger()

DEFAULT_TTL_SECONDS = 60.0
DEFAULT_MAX_ENTRIES = 100


class InMemoryCache(TranslationCache):
    """LRU cache of translation maps with a time-to-live per entry.

    Reads promote an entry to most recently used. Inserting a new locale at
    capacity evicts the least recently used one; updating an existing locale
    never evicts. Expired entries read as missing and are dropped lazily.

    Suitable for single-process deployments or as a first tier in front of
    an external cache.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize in-memory cache.

        Args:
            ttl_seconds: Lifetime of an entry after it is set.
            max_entries: Maximum number of cached locales.
            clock: Monotonic time source, injectable for tests.
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[TranslationMap, float]]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def _live_entry(self, locale: str) -> Optional[TranslationMap]:
        # Caller holds the lock
        entry = self._entries.get(locale)
        if entry is None:
            return None
        translations, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[locale]
            logger.debug("translation_cache_entry_expired", locale=locale)
            return None
        return translations

    async def get(self, locale: str) -> Optional[TranslationMap]:
        with self._lock:
            translations = self._live_entry(locale)
            if translations is None:
                self._misses += 1
                return None
            self._entries.move_to_end(locale)
            self._hits += 1
            return translations

    async def set(self, locale: str, translations: TranslationMap) -> None:
        expires_at = self._clock() + self.ttl_seconds
        with self._lock:
            if locale in self._entries:
                self._entries[locale] = (translations, expires_at)
                self._entries.move_to_end(locale)
                return

            if len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug("translation_cache_evicted", locale=evicted)

            self._entries[locale] = (translations, expires_at)

    async def has(self, locale: str) -> bool:
        with self._lock:
            return self._live_entry(locale) is not None

    async def invalidate(self, locale: Optional[str] = None) -> None:
        with self._lock:
            if locale is None:
                count = len(self._entries)
                self._entries.clear()
                logger.info("translation_cache_cleared", entries_removed=count)
            else:
                self._entries.pop(locale, None)
                logger.debug("translation_cache_invalidated", locale=locale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with size, limits, and hit/miss/eviction counters.
        """
        with self._lock:
            return {
                "backend": "memory",
                "size": len(self._entries),
                "max_entries": self.max_entries,
                "ttl_seconds": self.ttl_seconds,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }
