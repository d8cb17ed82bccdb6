"""Loads per-locale translation maps through the cache tiers."""

import asyncio
from types import MappingProxyType
from typing import List, Optional, Tuple

from i18n_runtime.caching.base import TranslationCache
from i18n_runtime.caching.scoped import RequestScopedCache
from i18n_runtime.exceptions import StorageError
from i18n_runtime.logging import get_module_logger
from i18n_runtime.models import EMPTY_TRANSLATIONS, SourceString, TranslationMap
from i18n_runtime.storage import StorageAdapter

logger = get_module_logger()

DEFAULT_STORAGE_TIMEOUT_SECONDS = 5.0


class TranslationMapLoader:
    """Resolves a locale's translation map: request cache, shared cache, storage.

    A storage timeout degrades to an empty map, which is returned but not
    cached. Any other storage failure is raised as ``StorageError``.

    Attributes:
        storage: Source of translation maps.
        cache: Cache shared across units of work.
        storage_timeout_seconds: Upper bound on a single storage load.
    """

    def __init__(
        self,
        storage: StorageAdapter,
        cache: TranslationCache,
        storage_timeout_seconds: Optional[float] = DEFAULT_STORAGE_TIMEOUT_SECONDS,
    ):
        self.storage = storage
        self.cache = cache
        self.storage_timeout_seconds = storage_timeout_seconds

    async def load(
        self, locale: str, request_cache: Optional[RequestScopedCache] = None
    ) -> TranslationMap:
        """Load the translation map for a single locale.

        Args:
            locale: Locale code.
            request_cache: Deduplicates loads within the current unit of work.

        Returns:
            Read-only translation map, possibly empty.

        Raises:
            StorageError: If storage fails for a reason other than a timeout.
        """
        if request_cache is not None:
            return await request_cache.get_or_load(
                locale, lambda: self._load_shared(locale)
            )
        return await self._load_shared(locale)

    async def _load_shared(self, locale: str) -> TranslationMap:
        cached = await self.cache.get(locale)
        if cached is not None:
            logger.debug("translation_cache_hit", locale=locale)
            return cached

        translations, complete = await self._fetch(locale)
        if complete:
            await self.cache.set(locale, translations)
        return translations

    async def _fetch(self, locale: str) -> Tuple[TranslationMap, bool]:
        try:
            translations = await asyncio.wait_for(
                self.storage.get_translations(locale),
                timeout=self.storage_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "translation_load_timeout",
                locale=locale,
                timeout_seconds=self.storage_timeout_seconds,
            )
            return EMPTY_TRANSLATIONS, False
        except StorageError:
            raise
        except Exception as e:
            logger.error("translation_load_failed", locale=locale, error=str(e))
            raise StorageError(
                f"Failed to load translations for {locale}: {e}", locale
            ) from e

        logger.debug("translations_loaded", locale=locale, count=len(translations))
        return MappingProxyType(dict(translations)), True

    async def load_sources(self) -> List[SourceString]:
        """Load the registered source strings from storage.

        Returns:
            Source strings; empty when storage times out.

        Raises:
            StorageError: If storage fails for a reason other than a timeout.
        """
        try:
            sources = await asyncio.wait_for(
                self.storage.get_sources(), timeout=self.storage_timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning(
                "source_load_timeout", timeout_seconds=self.storage_timeout_seconds
            )
            return []
        except StorageError:
            raise
        except Exception as e:
            logger.error("source_load_failed", error=str(e))
            raise StorageError(f"Failed to load source strings: {e}") from e

        logger.debug("sources_loaded", count=len(sources))
        return list(sources)
