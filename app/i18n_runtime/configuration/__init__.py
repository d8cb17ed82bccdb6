"""Runtime configuration module - public API.

Exports:
    get_settings: Cached Settings provider (main configuration object)
    Settings: Main settings class (for testing/overrides)

Example:
    ```python
    from i18n_runtime.configuration import get_settings

    settings = get_settings()
    depth = settings.formatter.max_nesting_depth
    ```
"""

from i18n_runtime.configuration.settings import (
    CacheSettings,
    FormatterSettings,
    LocaleSettings,
    PluralSettings,
    Settings,
    ValidationSettings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "LocaleSettings",
    "FormatterSettings",
    "PluralSettings",
    "CacheSettings",
    "ValidationSettings",
]
