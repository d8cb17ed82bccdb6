"""Per-unit-of-work translation scope and its propagation.

A scope carries the resolved locale, its fallback chain and the merged,
read-only translation map for one unit of work (typically one request). The
active scope travels in a ``ContextVar``, so it follows ``await`` and is
copied into tasks spawned while it is active, without leaking between
concurrent units of work.

Usage:
    from i18n_runtime.scope import TranslationScope, t, use_scope

    scope = TranslationScope.create("pt-BR", translations={"35ddf285": "Olá Mundo"})
    with use_scope(scope):
        t("Hello World")  # "Olá Mundo"

    t("Hello World")  # "Hello World" outside any scope
"""

import contextvars
import inspect
from contextlib import contextmanager
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Generator, List, Mapping, Optional, Sequence, Tuple

from i18n_runtime.configuration import get_settings
from i18n_runtime.formatter import (
    ErrorCallback,
    MessageFormatter,
    Params,
    get_default_formatter,
)
from i18n_runtime.hashing import derive_key
from i18n_runtime.logging import bind_scope_context
from i18n_runtime.models import EMPTY_TRANSLATIONS, TranslationMap
from i18n_runtime.resolvers import build_locale_chain
from i18n_runtime.storage import StorageAdapter

_current_scope: "contextvars.ContextVar[Optional[TranslationScope]]" = (
    contextvars.ContextVar("i18n_translation_scope", default=None)
)


def _configured_default_locale() -> str:
    return get_settings().locales.default_locale


@dataclass(frozen=True)
class TranslationScope:
    """Immutable translation state for one unit of work.

    Attributes:
        locale: Resolved locale of the unit of work.
        default_locale: Source-language locale; lookups in it skip translation.
        locale_chain: Fallback chain, most specific first.
        translations: Merged read-only map of key to translated pattern.
        translations_for_client: Read-only map of source text to translated
            pattern, for hydrating client-side lookups.
        storage: Storage the translations were loaded from, if any.
        formatter: Formatter for patterns; the process default when None.
    """

    locale: str
    default_locale: str
    locale_chain: Tuple[str, ...]
    translations: TranslationMap = field(default_factory=lambda: EMPTY_TRANSLATIONS)
    translations_for_client: TranslationMap = field(
        default_factory=lambda: EMPTY_TRANSLATIONS
    )
    storage: Optional[StorageAdapter] = field(default=None, compare=False)
    formatter: Optional[MessageFormatter] = field(default=None, compare=False)

    @classmethod
    def create(
        cls,
        locale: str,
        default_locale: Optional[str] = None,
        locale_chain: Optional[Sequence[str]] = None,
        translations: Optional[Mapping[str, str]] = None,
        translations_for_client: Optional[Mapping[str, str]] = None,
        storage: Optional[StorageAdapter] = None,
        formatter: Optional[MessageFormatter] = None,
    ) -> "TranslationScope":
        """Create a scope, building the chain and freezing the map.

        Args:
            locale: Resolved locale.
            default_locale: Source locale (configured default if None).
            locale_chain: Explicit fallback chain; built from the locales if None.
            translations: Merged translation map; copied and frozen.
            translations_for_client: Source text keyed map; copied and frozen.
            storage: Storage reference kept for diagnostics.
            formatter: Formatter used by ``lookup``.

        Returns:
            New TranslationScope.
        """
        default_locale = default_locale or _configured_default_locale()
        if locale_chain is None:
            locale_chain = build_locale_chain(locale, default_locale)
        return cls(
            locale=locale,
            default_locale=default_locale,
            locale_chain=tuple(locale_chain),
            translations=MappingProxyType(dict(translations or {})),
            translations_for_client=MappingProxyType(
                dict(translations_for_client or {})
            ),
            storage=storage,
            formatter=formatter,
        )

    def resolve_pattern(self, text: str, context: Optional[str] = None) -> str:
        """Return the translated pattern for a source string, or the source itself."""
        if self.locale == self.default_locale:
            return text
        return self.translations.get(derive_key(text, context), text)

    def lookup(
        self,
        text: str,
        *,
        context: Optional[str] = None,
        params: Optional[Params] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> str:
        """Translate and format a source string in this scope's locale.

        Args:
            text: Source text as written in the default locale.
            context: Disambiguation context used when the string was registered.
            params: Interpolation values.
            on_error: Receives FormatErrors for degraded output.

        Returns:
            Formatted translation, or the formatted source text when untranslated.
        """
        pattern = self.resolve_pattern(text, context)
        formatter = self.formatter or get_default_formatter()
        return formatter.format(pattern, params, locale=self.locale, on_error=on_error)


def get_current_scope() -> Optional[TranslationScope]:
    return _current_scope.get()


def is_inside_scope() -> bool:
    return _current_scope.get() is not None


@contextmanager
def use_scope(scope: TranslationScope) -> Generator[TranslationScope, None, None]:
    """Activate a scope for the enclosed block.

    Also binds the scope's locales into the structured logging context.

    Args:
        scope: Scope to activate.

    Example:
        with use_scope(scope):
            await render_page()
    """
    token = _current_scope.set(scope)
    try:
        with bind_scope_context(locale=scope.locale, default_locale=scope.default_locale):
            yield scope
    finally:
        _current_scope.reset(token)


def _call_in_scope(scope: TranslationScope, fn: Callable, args, kwargs) -> Any:
    with use_scope(scope):
        return fn(*args, **kwargs)


async def _await_in_scope(scope: TranslationScope, fn: Callable, args, kwargs) -> Any:
    with use_scope(scope):
        return await fn(*args, **kwargs)


def run_with_scope(scope: TranslationScope, fn: Callable, *args, **kwargs) -> Any:
    """Call ``fn`` with ``scope`` active.

    Plain callables run immediately in a copy of the current context. For
    coroutine functions an awaitable is returned; the scope is active while
    it runs.

    Args:
        scope: Scope to activate.
        fn: Callable or coroutine function.
        *args: Positional arguments for ``fn``.
        **kwargs: Keyword arguments for ``fn``.

    Returns:
        The result of ``fn``, or an awaitable producing it.
    """
    if inspect.iscoroutinefunction(fn):
        return _await_in_scope(scope, fn, args, kwargs)
    return contextvars.copy_context().run(_call_in_scope, scope, fn, args, kwargs)


def get_locale() -> str:
    scope = _current_scope.get()
    return scope.locale if scope else _configured_default_locale()


def get_default_locale() -> str:
    scope = _current_scope.get()
    return scope.default_locale if scope else _configured_default_locale()


def get_locale_chain() -> List[str]:
    scope = _current_scope.get()
    if scope is None:
        return [_configured_default_locale()]
    return list(scope.locale_chain)


def get_translations() -> TranslationMap:
    scope = _current_scope.get()
    return scope.translations if scope else EMPTY_TRANSLATIONS


def get_translations_for_client() -> TranslationMap:
    scope = _current_scope.get()
    return scope.translations_for_client if scope else EMPTY_TRANSLATIONS


def t(
    text: str,
    *,
    context: Optional[str] = None,
    params: Optional[Params] = None,
    on_error: Optional[ErrorCallback] = None,
) -> str:
    """Translate a source string in the active scope.

    Outside any scope the source text is formatted as-is, in the default
    locale.

    Args:
        text: Source text.
        context: Disambiguation context.
        params: Interpolation values.
        on_error: Receives FormatErrors for degraded output.

    Returns:
        Translated, formatted text.

    Example:
        t("Hello {name}", params={"name": "Ana"})
        t("Submit", context="form")
    """
    scope = _current_scope.get()
    if scope is not None:
        return scope.lookup(text, context=context, params=params, on_error=on_error)
    return get_default_formatter().format(text, params, on_error=on_error)
