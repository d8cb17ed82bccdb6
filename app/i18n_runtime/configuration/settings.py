"""Translation runtime configuration settings - main aggregator."""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from i18n_runtime.configuration.base import RuntimeSettings


class LocaleSettings(RuntimeSettings):
    """Locale selection configuration.

    Environment Variables:
        I18N_DEFAULT_LOCALE: Source-language locale (default: en)
        I18N_ENABLED_LOCALES: Locales a request may resolve to (JSON list)
    """

    default_locale: str = Field(
        default="en",
        alias="I18N_DEFAULT_LOCALE",
        description="Locale the source strings are written in",
    )
    enabled_locales: List[str] = Field(
        default_factory=lambda: ["en"],
        alias="I18N_ENABLED_LOCALES",
        description="Locales that requests are allowed to resolve to",
    )


class FormatterSettings(RuntimeSettings):
    """Message formatter security limits.

    Environment Variables:
        ICU_MAX_NESTING_DEPTH: Deepest plural/select nesting that is resolved (default: 5)
        ICU_MAX_TEXT_LENGTH: Patterns are truncated to this many characters (default: 50000)
        ICU_MAX_ITERATIONS: Block resolutions allowed per format call (default: 100)
    """

    max_nesting_depth: int = Field(default=5, alias="ICU_MAX_NESTING_DEPTH")
    max_text_length: int = Field(default=50_000, alias="ICU_MAX_TEXT_LENGTH")
    max_iterations: int = Field(default=100, alias="ICU_MAX_ITERATIONS")


class PluralSettings(RuntimeSettings):
    """Plural rule cache configuration.

    Environment Variables:
        PLURAL_CACHE_MAX_SIZE: Server-side rule cache capacity (default: 50)
        PLURAL_CACHE_CLIENT_MAX_SIZE: Client-side rule cache capacity (default: 10)
        PLURAL_FALLBACK_LOCALE: Rules used for unknown locales (default: en)
    """

    max_size: int = Field(default=50, alias="PLURAL_CACHE_MAX_SIZE")
    client_max_size: int = Field(default=10, alias="PLURAL_CACHE_CLIENT_MAX_SIZE")
    fallback_locale: str = Field(default="en", alias="PLURAL_FALLBACK_LOCALE")


class CacheSettings(RuntimeSettings):
    """Translation map cache configuration.

    Environment Variables:
        TRANSLATION_CACHE_BACKEND: 'memory' or 'external' (default: memory)
        TRANSLATION_CACHE_TTL_SECONDS: In-memory entry lifetime (default: 60s)
        TRANSLATION_CACHE_MAX_ENTRIES: In-memory locale capacity (default: 100)
        EXTERNAL_CACHE_PREFIX: Key prefix in the backing store
        EXTERNAL_CACHE_TTL_SECONDS: Backing store entry lifetime (default: 3600s)
        CACHE_BACKEND_TIMEOUT_SECONDS: Per-call backing store timeout (default: 1s)
        STORAGE_TIMEOUT_SECONDS: Translation load timeout (default: 5s)
        REDIS_URL: Connection URL for the Redis backing store

    Example:
        ```python
        from i18n_runtime.configuration import get_settings

        settings = get_settings()
        if settings.cache.backend == "external":
            store = RedisBackingStore.from_url(settings.cache.redis_url)
        ```
    """

    backend: str = Field(
        default="memory",
        alias="TRANSLATION_CACHE_BACKEND",
        description="Cache backend: 'memory' or 'external'",
    )
    ttl_seconds: float = Field(default=60, alias="TRANSLATION_CACHE_TTL_SECONDS")
    max_entries: int = Field(default=100, alias="TRANSLATION_CACHE_MAX_ENTRIES")
    external_prefix: str = Field(
        default="i18n:translations:", alias="EXTERNAL_CACHE_PREFIX"
    )
    external_ttl_seconds: int = Field(default=3600, alias="EXTERNAL_CACHE_TTL_SECONDS")
    backend_timeout_seconds: float = Field(
        default=1.0, alias="CACHE_BACKEND_TIMEOUT_SECONDS"
    )
    storage_timeout_seconds: float = Field(default=5.0, alias="STORAGE_TIMEOUT_SECONDS")
    redis_url: Optional[str] = Field(default=None, alias="REDIS_URL")


class ValidationSettings(RuntimeSettings):
    """Input limits enforced at the ingestion boundary."""

    max_source_text_length: int = Field(default=10 * 1024, alias="MAX_SOURCE_TEXT_LENGTH")
    max_locale_length: int = Field(default=35, alias="MAX_LOCALE_LENGTH")
    max_context_length: int = Field(default=100, alias="MAX_CONTEXT_LENGTH")
    max_hash_length: int = Field(default=16, alias="MAX_HASH_LENGTH")
    max_batch_size: int = Field(default=1000, alias="MAX_BATCH_SIZE")


class Settings(BaseSettings):
    """Translation runtime configuration settings - main aggregator.

    Aggregates all concern-specific settings into a single configuration object.

    Environment Variables:
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        ENVIRONMENT: Deployment environment name (production enables JSON logs)
    """

    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    locales: LocaleSettings
    formatter: FormatterSettings
    plurals: PluralSettings
    cache: CacheSettings
    validation: ValidationSettings

    @property
    def is_production(self) -> bool:
        """Check if the runtime is deployed in production.

        Returns:
            True if ENVIRONMENT is 'production', False otherwise.
        """
        return self.ENVIRONMENT.lower() == "production"

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            "locales": LocaleSettings,
            "formatter": FormatterSettings,
            "plurals": PluralSettings,
            "cache": CacheSettings,
            "validation": ValidationSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get process-wide settings singleton.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()
