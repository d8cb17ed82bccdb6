"""Translation runtime factory."""

from typing import Optional

from i18n_runtime.caching import CacheBackingStore, create_translation_cache
from i18n_runtime.configuration import Settings, get_settings
from i18n_runtime.formatter import MessageFormatter
from i18n_runtime.service import LocaleDetector, TranslationRuntime
from i18n_runtime.storage import StorageAdapter


def create_runtime(
    storage: StorageAdapter,
    settings: Optional[Settings] = None,
    backing_store: Optional[CacheBackingStore] = None,
    locale_detector: Optional[LocaleDetector] = None,
) -> TranslationRuntime:
    """Create a translation runtime from settings.

    Args:
        storage: Storage collaborator supplying translation maps.
        settings: Runtime settings (uses process settings if None).
        backing_store: Store for an external shared cache.
        locale_detector: Sync or async callable returning a preferred locale.

    Returns:
        Configured TranslationRuntime.

    Example:
        runtime = create_runtime(YAMLStorageAdapter("locales"))
        scope = await runtime.create_scope("pt-BR")
    """
    settings = settings or get_settings()
    return TranslationRuntime(
        storage=storage,
        cache=create_translation_cache(settings, backing_store),
        default_locale=settings.locales.default_locale,
        enabled_locales=settings.locales.enabled_locales,
        locale_detector=locale_detector,
        formatter=MessageFormatter(settings=settings),
        storage_timeout_seconds=settings.cache.storage_timeout_seconds,
    )
