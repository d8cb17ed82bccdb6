"""Core data structures for source strings and translations."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from i18n_runtime.hashing import derive_key

# Key -> translated text for one resolved locale
TranslationMap = Mapping[str, str]

EMPTY_TRANSLATIONS: TranslationMap = MappingProxyType({})


@dataclass(frozen=True)
class SourceString:
    """A source-language string registered for translation.

    Identity is ``hash``, a pure function of ``(context, text.strip())``.

    Attributes:
        hash: 8-character lookup key.
        text: Source text as written.
        context: Optional disambiguation context.
    """

    hash: str
    text: str
    context: Optional[str] = None

    @classmethod
    def from_text(cls, text: str, context: Optional[str] = None) -> "SourceString":
        """Create a SourceString with its key derived from text and context.

        Args:
            text: Source text.
            context: Optional disambiguation context.

        Returns:
            SourceString instance.
        """
        return cls(hash=derive_key(text, context), text=text, context=context)


@dataclass(frozen=True)
class TranslationEntry:
    """A translated text for one (locale, hash) pair.

    Attributes:
        locale: Target locale.
        hash: Key of the source string.
        text: Translated text (may be a message pattern).
        auto_generated: Produced by machine translation.
        reviewed: Approved by a human reviewer.
        source_hash: Key of the source text the translation was made from.
    """

    locale: str
    hash: str
    text: str
    auto_generated: bool = False
    reviewed: bool = False
    source_hash: Optional[str] = field(default=None)

    def is_stale(self, current_hash: str) -> bool:
        """Check whether the source changed since this entry was translated.

        Entries without a recorded source hash are never considered stale.
        """
        return self.source_hash is not None and self.source_hash != current_hash


def merge_translation_maps(
    chain: Iterable[str],
    maps: Mapping[str, TranslationMap],
) -> TranslationMap:
    """Merge per-locale maps along a fallback chain.

    The chain is ordered most specific first; maps are applied least specific
    first so more specific locales override their ancestors.

    Args:
        chain: Locale fallback chain, most specific first.
        maps: Translation map per locale; missing locales are skipped.

    Returns:
        Read-only merged TranslationMap.
    """
    merged: dict = {}
    for locale in reversed(list(chain)):
        translations = maps.get(locale)
        if translations:
            merged.update(translations)
    return MappingProxyType(merged)


def build_client_translations(
    translations: TranslationMap,
    sources: Iterable[SourceString],
) -> TranslationMap:
    """Re-key a translation map by source text for client-side lookup.

    Sources without a translation are left out. When two sources share the
    same text (different contexts), the later one wins.

    Args:
        translations: Key to translated text for one resolved locale.
        sources: Registered source strings.

    Returns:
        Read-only map of source text to translated text.
    """
    by_source = {}
    for source in sources:
        translated = translations.get(source.hash)
        if translated:
            by_source[source.text] = translated
    return MappingProxyType(by_source)
