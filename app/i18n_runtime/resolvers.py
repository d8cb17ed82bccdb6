"""Locale resolution and fallback-chain construction.

Provides the fallback chain used to assemble a scope's translation map and
strategies for resolving the locale of a unit of work (explicit request,
Accept-Language header, default).
"""

import re
from typing import List, Optional, Sequence

from i18n_runtime.logging import get_module_logger

logger = get_module_logger()

_BASIC_LOCALE = re.compile(r"^[a-z]{2}(-[a-z]{2,4})?$", re.IGNORECASE)


def build_locale_chain(requested: str, default_locale: str) -> List[str]:
    """Build the ordered fallback chain for a requested locale.

    The chain starts with the full requested code, then its primary language
    subtag when that differs from both the full code and the default, and
    always ends with the default locale. Only two levels are expanded:
    ``zh-Hant-TW`` falls back directly to ``zh``.

    Args:
        requested: Requested locale code (e.g. "pt-BR").
        default_locale: Source-language locale (e.g. "en").

    Returns:
        Non-empty list, most specific first, without duplicates.

    Examples:
        >>> build_locale_chain("pt-BR", "en")
        ['pt-BR', 'pt', 'en']
        >>> build_locale_chain("en-GB", "en")
        ['en-GB', 'en']
        >>> build_locale_chain("en", "en")
        ['en']
    """
    if not requested or requested == default_locale:
        return [default_locale]

    chain = [requested]
    primary = requested.split("-", 1)[0]
    if primary and primary != requested and primary != default_locale:
        chain.append(primary)
    chain.append(default_locale)
    return chain


def is_valid_locale(code: str) -> bool:
    """Check a locale code against the basic ``ll`` / ``ll-Xx`` form.

    Accepts a two-letter language optionally followed by one 2-4 letter
    region or script subtag (``en``, ``zh-TW``, ``zh-hans``).
    """
    return isinstance(code, str) and _BASIC_LOCALE.match(code) is not None


def parse_accept_language(header: Optional[str]) -> List[str]:
    """Parse an Accept-Language header into locale codes, most preferred first.

    Wildcards and ranges with ``q=0`` are dropped. An unreadable quality
    value counts as 1. Ranges of equal quality keep their header order.

    Examples:
        >>> parse_accept_language("fr-CA,fr;q=0.9,en;q=0.8")
        ['fr-CA', 'fr', 'en']
    """
    if not header:
        return []

    weighted = []
    for part in header.split(","):
        lang_range, _, params = part.partition(";")
        lang_range = lang_range.strip()
        if not lang_range or lang_range == "*":
            continue

        quality = 1.0
        name, _, value = params.partition("=")
        if name.strip().lower() == "q":
            try:
                quality = float(value)
            except ValueError:
                quality = 1.0
        if quality <= 0:
            continue
        weighted.append((lang_range, quality))

    weighted.sort(key=lambda item: item[1], reverse=True)
    return [lang_range for lang_range, _ in weighted]


def negotiate_locale(
    preferred: Sequence[str], enabled: Sequence[str]
) -> Optional[str]:
    """Pick the enabled locale that best serves an ordered preference list.

    Each preference is tried in turn: an exact match (case-insensitive), then
    its primary language subtag, then any enabled regional variant of that
    language (``pt`` is served by ``pt-BR``). Later preferences are only
    considered when an earlier one has no match at all.

    Args:
        preferred: Locale codes, most preferred first.
        enabled: Locale codes the runtime can serve.

    Returns:
        Enabled locale code as spelled in ``enabled``, or None.
    """
    by_lower = {code.lower(): code for code in enabled}

    for code in preferred:
        wanted = code.lower()
        if wanted in by_lower:
            return by_lower[wanted]

        primary = wanted.split("-", 1)[0]
        if primary in by_lower:
            return by_lower[primary]

        for candidate in enabled:
            if candidate.lower().split("-", 1)[0] == primary:
                return candidate

    return None


class LocaleResolver:
    """Resolves the locale of a unit of work against the enabled locales.

    The default locale is always enabled.
    """

    def __init__(
        self,
        default_locale: str = "en",
        enabled_locales: Optional[Sequence[str]] = None,
    ):
        """Initialize locale resolver.

        Args:
            default_locale: Fallback locale when no preference matches.
            enabled_locales: Locales a request may resolve to.
        """
        self.default_locale = default_locale
        enabled = list(enabled_locales or [])
        if default_locale not in enabled:
            enabled.insert(0, default_locale)
        self.enabled_locales = enabled
        self.log = logger.bind(default_locale=default_locale)

    def is_enabled(self, locale: Optional[str]) -> bool:
        return locale is not None and locale in self.enabled_locales

    def resolve(self, requested: Optional[str]) -> str:
        """Return the requested locale if enabled, else the default."""
        if self.is_enabled(requested):
            return requested
        if requested:
            self.log.debug("requested_locale_not_enabled", requested=requested)
        return self.default_locale

    def match_header(self, accept_language: Optional[str]) -> Optional[str]:
        """Match an Accept-Language header against the enabled locales.

        Returns:
            Best enabled locale, or None when nothing in the header matches.
        """
        preferred = parse_accept_language(accept_language)
        if not preferred:
            return None

        match = negotiate_locale(preferred, self.enabled_locales)
        if match is None:
            self.log.debug("no_matching_locale_in_header", preferred=preferred)
        else:
            self.log.debug("resolved_from_header", locale=match)
        return match

    def resolve_from_header(self, accept_language: Optional[str]) -> str:
        """Resolve locale from an HTTP Accept-Language header.

        Args:
            accept_language: Header value (e.g. "fr-CA,fr;q=0.9,en;q=0.8").

        Returns:
            Best enabled locale, or the default if none match.
        """
        return self.match_header(accept_language) or self.default_locale
