"""Translation resolution runtime.

Resolves source strings to locale-specific text at request time:
content-addressed keys, a bounded ICU-style message formatter, locale
fallback chains, and tiered translation map caching.

Usage:

    from i18n_runtime import YAMLStorageAdapter, configure_logging, create_runtime, t

    configure_logging()  # optional; hosts with their own logging setup skip it
    runtime = create_runtime(YAMLStorageAdapter("locales"))

    async def handle(request):
        return await runtime.run(
            lambda: t("{count, plural, one {# item} other {# items}}", params={"count": 3}),
            locale=request.locale,
        )
"""

from i18n_runtime.caching import (
    CacheBackingStore,
    ExternalCache,
    InMemoryCache,
    RedisBackingStore,
    RequestScopedCache,
    TranslationCache,
    TranslationMapLoader,
    create_translation_cache,
)
from i18n_runtime.exceptions import (
    CacheBackendError,
    FormatError,
    FormatErrorKind,
    I18nError,
    StorageError,
    ValidationError,
)
from i18n_runtime.factory import create_runtime
from i18n_runtime.formatter import MessageFormatter, format_message, get_default_formatter
from i18n_runtime.hashing import derive_key
from i18n_runtime.locales import (
    ALL_LOCALES,
    LocaleInfo,
    get_locale_english_name,
    get_locale_info,
    get_locale_native_name,
)
from i18n_runtime.logging import configure_logging
from i18n_runtime.models import (
    SourceString,
    TranslationEntry,
    TranslationMap,
    build_client_translations,
)
from i18n_runtime.plurals import PluralCategoryCache, get_plural_category
from i18n_runtime.resolvers import (
    LocaleResolver,
    build_locale_chain,
    negotiate_locale,
    parse_accept_language,
)
from i18n_runtime.scope import (
    TranslationScope,
    get_current_scope,
    get_default_locale,
    get_locale,
    get_locale_chain,
    get_translations,
    get_translations_for_client,
    is_inside_scope,
    run_with_scope,
    t,
    use_scope,
)
from i18n_runtime.service import TranslationRuntime
from i18n_runtime.storage import InMemoryStorage, StorageAdapter, YAMLStorageAdapter

__all__ = [
    # Keys and formatting
    "derive_key",
    "format_message",
    "MessageFormatter",
    "get_default_formatter",
    "PluralCategoryCache",
    "get_plural_category",
    # Locales
    "build_locale_chain",
    "LocaleResolver",
    "parse_accept_language",
    "negotiate_locale",
    "LocaleInfo",
    "ALL_LOCALES",
    "get_locale_info",
    "get_locale_native_name",
    "get_locale_english_name",
    # Data
    "SourceString",
    "TranslationEntry",
    "TranslationMap",
    "build_client_translations",
    # Storage
    "StorageAdapter",
    "InMemoryStorage",
    "YAMLStorageAdapter",
    # Caching
    "TranslationCache",
    "CacheBackingStore",
    "InMemoryCache",
    "ExternalCache",
    "RedisBackingStore",
    "RequestScopedCache",
    "TranslationMapLoader",
    "create_translation_cache",
    # Scope
    "TranslationScope",
    "use_scope",
    "run_with_scope",
    "get_current_scope",
    "is_inside_scope",
    "get_locale",
    "get_default_locale",
    "get_locale_chain",
    "get_translations",
    "get_translations_for_client",
    "t",
    # Runtime
    "TranslationRuntime",
    "create_runtime",
    # Logging
    "configure_logging",
    # Errors
    "I18nError",
    "ValidationError",
    "FormatError",
    "FormatErrorKind",
    "CacheBackendError",
    "StorageError",
]
