"""CLDR plural category selection with a bounded rule cache.

Rule objects come from Babel's CLDR data. Constructing them requires parsing
locale data, so they are kept in a bounded LRU shared across scopes.
"""

import threading
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from babel import Locale as BabelLocale
from babel.core import UnknownLocaleError
from babel.plural import PluralRule

from i18n_runtime.configuration import Settings, get_settings
from i18n_runtime.logging import get_module_logger

logger = get_module_logger()

Number = Union[int, float, Decimal]

PLURAL_CATEGORIES = ("zero", "one", "two", "few", "many", "other")
DEFAULT_PLURAL_LOCALE = "en"
SERVER_CACHE_SIZE = 50
CLIENT_CACHE_SIZE = 10


class PluralCategoryCache:
    """Bounded LRU map of locale code to plural rule.

    ``get`` promotes the entry to most-recently-used. ``set`` evicts the
    least-recently-used entry only when inserting a new key at capacity.
    All operations hold an internal lock; the cache is shared across threads.

    Attributes:
        max_size: Maximum number of rule sets kept.
    """

    def __init__(self, max_size: int = SERVER_CACHE_SIZE):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._entries: "OrderedDict[str, PluralRule]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, locale: str) -> Optional[PluralRule]:
        with self._lock:
            rule = self._entries.get(locale)
            if rule is not None:
                self._entries.move_to_end(locale)
            return rule

    def set(self, locale: str, rule: PluralRule) -> None:
        with self._lock:
            if locale in self._entries:
                self._entries[locale] = rule
                self._entries.move_to_end(locale)
                return

            if len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("plural_rule_evicted", locale=evicted)

            self._entries[locale] = rule

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, locale: object) -> bool:
        with self._lock:
            return locale in self._entries

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with current size, capacity and cached locales (LRU first).
        """
        with self._lock:
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "locales": list(self._entries.keys()),
            }


def create_plural_cache(
    client: bool = False, settings: Optional[Settings] = None
) -> PluralCategoryCache:
    """Create a plural rule cache sized for server or client use.

    Args:
        client: Use the smaller client-side capacity.
        settings: Optional Settings instance (defaults to get_settings()).

    Returns:
        Empty PluralCategoryCache.
    """
    settings = settings or get_settings()
    size = settings.plurals.client_max_size if client else settings.plurals.max_size
    return PluralCategoryCache(max_size=size)


def _load_rule(locale: str) -> PluralRule:
    return BabelLocale.parse(locale, sep="-").plural_form


def _resolve_rule(locale: str, fallback_locale: str) -> PluralRule:
    try:
        return _load_rule(locale)
    except (UnknownLocaleError, ValueError, TypeError) as e:
        logger.debug(
            "plural_rule_fallback",
            locale=locale,
            fallback_locale=fallback_locale,
            error=str(e),
        )
        return _load_rule(fallback_locale)


def get_plural_category(
    value: Number,
    locale: str,
    cache: Optional[PluralCategoryCache] = None,
    fallback_locale: str = DEFAULT_PLURAL_LOCALE,
) -> str:
    """Select the CLDR plural category for a number in a locale.

    Unknown or malformed locale codes use the fallback locale's rules.

    Args:
        value: Number to categorize.
        locale: BCP 47 locale code (e.g. "en", "pt-BR").
        cache: Optional rule cache; populated on miss.
        fallback_locale: Locale whose rules apply when ``locale`` is unknown.

    Returns:
        One of "zero", "one", "two", "few", "many", "other".

    Examples:
        >>> get_plural_category(1, "en")
        'one'
        >>> get_plural_category(5, "ja")
        'other'
    """
    rule = cache.get(locale) if cache is not None else None
    if rule is None:
        rule = _resolve_rule(locale, fallback_locale)
        if cache is not None:
            cache.set(locale, rule)
    return rule(value)
