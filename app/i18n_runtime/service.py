"""Translation runtime orchestration.

Ties locale detection, translation loading through the cache tiers, and scope
creation together for a host application.
"""

import inspect
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from i18n_runtime.caching import (
    InMemoryCache,
    RequestScopedCache,
    TranslationCache,
    TranslationMapLoader,
)
from i18n_runtime.caching.loader import DEFAULT_STORAGE_TIMEOUT_SECONDS
from i18n_runtime.formatter import MessageFormatter, get_default_formatter
from i18n_runtime.locales import get_locale_native_name
from i18n_runtime.logging import get_module_logger
from i18n_runtime.models import (
    EMPTY_TRANSLATIONS,
    SourceString,
    TranslationMap,
    build_client_translations,
    merge_translation_maps,
)
from i18n_runtime.resolvers import LocaleResolver, build_locale_chain
from i18n_runtime.scope import TranslationScope, use_scope
from i18n_runtime.storage import StorageAdapter

logger = get_module_logger()

LocaleDetector = Callable[[], Union[Optional[str], Awaitable[Optional[str]]]]


class TranslationRuntime:
    """Creates translation scopes for units of work.

    Attributes:
        storage: Source of translation maps.
        cache: Cache shared by every scope this runtime creates.
        formatter: Formatter attached to created scopes.
        resolver: Restricts locales to the enabled set.
        loader: Loads single-locale maps through the cache tiers.
    """

    def __init__(
        self,
        storage: StorageAdapter,
        cache: Optional[TranslationCache] = None,
        default_locale: str = "en",
        enabled_locales: Optional[Sequence[str]] = None,
        locale_detector: Optional[LocaleDetector] = None,
        formatter: Optional[MessageFormatter] = None,
        storage_timeout_seconds: Optional[float] = DEFAULT_STORAGE_TIMEOUT_SECONDS,
    ):
        """Initialize the runtime.

        Args:
            storage: Storage collaborator supplying translation maps.
            cache: Shared translation cache (a fresh InMemoryCache if None).
            default_locale: Source-language locale.
            enabled_locales: Locales a unit of work may use.
            locale_detector: Sync or async callable returning the caller's
                preferred locale (e.g. read from a cookie or header).
            formatter: Formatter for scope lookups (process default if None).
            storage_timeout_seconds: Upper bound on a single storage load.
        """
        self.storage = storage
        self.cache = cache if cache is not None else InMemoryCache()
        self.formatter = formatter or get_default_formatter()
        self.resolver = LocaleResolver(default_locale, enabled_locales)
        self.locale_detector = locale_detector
        self.loader = TranslationMapLoader(storage, self.cache, storage_timeout_seconds)
        self._sources: Optional[List[SourceString]] = None
        logger.info(
            "initialized_translation_runtime",
            default_locale=default_locale,
            enabled_locales=self.resolver.enabled_locales,
            cache=type(self.cache).__name__,
        )

    def get_default_locale(self) -> str:
        return self.resolver.default_locale

    def get_enabled_locales(self) -> List[str]:
        return list(self.resolver.enabled_locales)

    async def detect_locale(
        self,
        requested: Optional[str] = None,
        accept_language: Optional[str] = None,
    ) -> str:
        """Resolve the locale for a unit of work.

        Resolution order: explicit request, locale detector, Accept-Language
        header, default locale. Locales that are not enabled are skipped.

        Args:
            requested: Locale explicitly asked for by the caller.
            accept_language: Accept-Language header of the request, if any.

        Returns:
            Enabled locale code.
        """
        if self.resolver.is_enabled(requested):
            return requested

        if self.locale_detector is not None:
            try:
                detected = self.locale_detector()
                if inspect.isawaitable(detected):
                    detected = await detected
            except Exception as e:
                logger.warning("locale_detection_failed", error=str(e))
                detected = None
            if self.resolver.is_enabled(detected):
                return detected

        from_header = self.resolver.match_header(accept_language)
        if from_header is not None:
            return from_header

        return self.resolver.resolve(requested)

    async def load_translations(
        self, locale: str, request_cache: Optional[RequestScopedCache] = None
    ) -> TranslationMap:
        """Load and merge the translation maps along a locale's fallback chain.

        The default locale is the source language and needs no translations.

        Args:
            locale: Resolved locale.
            request_cache: Deduplicates loads within the current unit of work.

        Returns:
            Merged read-only map; more specific locales override less specific.

        Raises:
            StorageError: If storage fails for a reason other than a timeout.
        """
        default_locale = self.get_default_locale()
        if locale == default_locale:
            return EMPTY_TRANSLATIONS

        chain = build_locale_chain(locale, default_locale)
        maps = {}
        for chain_locale in reversed(chain):
            if chain_locale == default_locale:
                continue
            maps[chain_locale] = await self.loader.load(chain_locale, request_cache)

        return merge_translation_maps(chain, maps)

    async def load_sources(self) -> List[SourceString]:
        """Load registered source strings, kept until the cache is invalidated.

        Raises:
            StorageError: If storage fails for a reason other than a timeout.
        """
        if self._sources is not None:
            return self._sources

        sources = await self.loader.load_sources()
        # an empty result may be a storage timeout; retry on next use
        if sources:
            self._sources = sources
        return sources

    async def create_scope(
        self,
        locale: Optional[str] = None,
        request_cache: Optional[RequestScopedCache] = None,
        accept_language: Optional[str] = None,
    ) -> TranslationScope:
        """Create the translation scope for one unit of work.

        Args:
            locale: Requested locale; detected when None or not enabled.
            request_cache: Per-request load cache (a new one if None).
            accept_language: Accept-Language header used during detection.

        Returns:
            TranslationScope with its translations loaded.

        Raises:
            StorageError: If translations cannot be loaded.
        """
        resolved = await self.detect_locale(locale, accept_language)
        request_cache = request_cache if request_cache is not None else RequestScopedCache()
        translations = await self.load_translations(resolved, request_cache)
        translations_for_client = EMPTY_TRANSLATIONS
        if translations:
            translations_for_client = build_client_translations(
                translations, await self.load_sources()
            )

        logger.debug(
            "translation_scope_created",
            locale=resolved,
            translation_count=len(translations),
        )
        return TranslationScope.create(
            resolved,
            default_locale=self.get_default_locale(),
            translations=translations,
            translations_for_client=translations_for_client,
            storage=self.storage,
            formatter=self.formatter,
        )

    async def run(self, fn: Callable[[], Any], locale: Optional[str] = None) -> Any:
        """Run ``fn`` inside a freshly created scope.

        Args:
            fn: Zero-argument callable or coroutine function.
            locale: Requested locale.

        Returns:
            Whatever ``fn`` returns (awaited if it returns an awaitable).
        """
        scope = await self.create_scope(locale)
        with use_scope(scope):
            result = fn()
            if inspect.isawaitable(result):
                result = await result
        return result

    async def get_client_data(
        self,
        locale: Optional[str] = None,
        accept_language: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Build the payload a client needs to translate on its own.

        Args:
            locale: Requested locale; detected when None or not enabled.
            accept_language: Accept-Language header used during detection.

        Returns:
            Dict with the resolved locale, default locale, enabled locales
            with their native names, and the source-text keyed translations.
        """
        scope = await self.create_scope(locale, accept_language=accept_language)
        enabled_locales = self.get_enabled_locales()
        return {
            "locale": scope.locale,
            "default_locale": scope.default_locale,
            "enabled_locales": enabled_locales,
            "locale_names": {
                code: get_locale_native_name(code) for code in enabled_locales
            },
            "translations": dict(scope.translations_for_client),
        }

    async def get_stats(self) -> Dict[str, Any]:
        """Count translated strings per enabled locale.

        Reads storage directly so the counts reflect what is stored, not
        what is cached.

        Returns:
            Dict with ``total_strings`` and, per non-default enabled locale,
            ``translated`` and ``total`` counts.
        """
        sources = await self.storage.get_sources()
        total_strings = len(sources)
        locales = {}
        for locale in self.get_enabled_locales():
            if locale == self.get_default_locale():
                continue
            translations = await self.storage.get_translations(locale)
            locales[locale] = {
                "translated": len(translations),
                "total": total_strings,
            }

        return {"total_strings": total_strings, "locales": locales}

    async def invalidate_cache(self, locale: Optional[str] = None) -> None:
        """Drop cached translations for one locale, or all of them.

        Registered source strings are reloaded on next use.
        """
        self._sources = None
        await self.cache.invalidate(locale)
        logger.info("translation_cache_invalidated", locale=locale or "*")
