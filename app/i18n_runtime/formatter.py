"""Bounded interpreter for ICU-style message patterns.

Supports ``{name}`` interpolation and ``{name, plural, ...}`` /
``{name, select, ...}`` blocks nested up to a depth limit. The formatter never
raises: oversize input, runaway nesting, too many blocks and malformed syntax
all degrade to a best-effort string and are reported through ``on_error``.

Usage:
    from i18n_runtime.formatter import FormatOptions, format_message

    format_message(
        "{count, plural, =0 {No items} one {# item} other {# items}}",
        {"count": 3},
        FormatOptions(locale="en"),
    )  # "3 items"
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from i18n_runtime.configuration import Settings, get_settings
from i18n_runtime.exceptions import FormatError, FormatErrorKind
from i18n_runtime.logging import get_module_logger
from i18n_runtime.plurals import (
    DEFAULT_PLURAL_LOCALE,
    PluralCategoryCache,
    create_plural_cache,
    get_plural_category,
)

logger = get_module_logger()

MAX_NESTING_DEPTH = 5
MAX_TEXT_LENGTH = 50_000
MAX_ITERATIONS = 100

Value = Union[str, int, float, Decimal]
Params = Mapping[str, Value]
ErrorCallback = Callable[[FormatError], None]

_ARGUMENT_NAME = re.compile(r"^\w[\w.-]*$")
_PLACEHOLDER = re.compile(r"\{\s*(\w[\w.-]*)\s*\}")
_BLOCK_TYPES = ("plural", "select")


@dataclass
class FormatOptions:
    """Per-call formatter configuration.

    Attributes:
        locale: Locale whose plural rules apply.
        plural_cache: Shared plural rule cache; rules are rebuilt when None.
        max_nesting_depth: Blocks nested deeper than this are left as literal text.
        max_text_length: Longer patterns are truncated before parsing.
        max_iterations: Block resolutions allowed before falling back to
            plain placeholder substitution.
        on_error: Called with a FormatError whenever output is degraded.
        plural_fallback_locale: Plural rules used for unknown locales.
    """

    locale: str = DEFAULT_PLURAL_LOCALE
    plural_cache: Optional[PluralCategoryCache] = None
    max_nesting_depth: int = MAX_NESTING_DEPTH
    max_text_length: int = MAX_TEXT_LENGTH
    max_iterations: int = MAX_ITERATIONS
    on_error: Optional[ErrorCallback] = None
    plural_fallback_locale: str = DEFAULT_PLURAL_LOCALE


class _IterationLimitExceeded(Exception):
    pass


class _PatternSyntaxError(Exception):
    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.position = position


def format_value(value: Any) -> str:
    """Render an interpolation value as text.

    Integral floats render without a fractional part and booleans as
    ``true``/``false``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            # past the interpreter's int string conversion limit
            return str(Decimal(value))
    return str(value)


def _to_number(value: Any) -> Optional[Union[int, float, Decimal]]:
    """Coerce a plural argument to a finite number, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = Decimal(text)
            except InvalidOperation:
                return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, int):
        return value
    return None


def _find_closing(text: str, start: int) -> int:
    """Return the index of the brace closing the one at ``start``, or -1."""
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1


def _parse_branches(source: str) -> List[Tuple[str, str]]:
    """Split ``selector {content} selector {content} ...`` into pairs."""
    branches: List[Tuple[str, str]] = []
    index, length = 0, len(source)

    while True:
        while index < length and source[index].isspace():
            index += 1
        if index >= length:
            break

        selector_start = index
        while index < length and not source[index].isspace() and source[index] not in "{}":
            index += 1
        selector = source[selector_start:index]

        while index < length and source[index].isspace():
            index += 1
        if not selector or index >= length or source[index] != "{":
            raise _PatternSyntaxError(
                f"missing branch body for selector {selector!r}", selector_start
            )

        end = _find_closing(source, index)
        if end < 0:
            raise _PatternSyntaxError("unterminated branch body", index)

        branches.append((selector, source[index + 1 : end]))
        index = end + 1

    if not branches:
        raise _PatternSyntaxError("block has no branches")
    return branches


def _pick(branches: List[Tuple[str, str]], label: str) -> Optional[str]:
    for selector, content in branches:
        if selector == label:
            return content
    return None


def _parse_exact(selector: str) -> Optional[int]:
    try:
        return int(selector[1:])
    except ValueError:
        return None


def _report(options: FormatOptions, error: FormatError) -> None:
    logger.debug("message_format_degraded", kind=error.kind.value, error=str(error))
    if options.on_error is None:
        return
    try:
        options.on_error(error)
    except Exception as e:  # callback failures must not escape format_message
        logger.warning("format_error_callback_failed", error=str(e))


class _Renderer:
    """Single-use recursive renderer holding the per-call iteration budget."""

    def __init__(self, params: Params, options: FormatOptions):
        self.params = params
        self.options = options
        self.iterations = 0
        self.depth_reported = False

    def render(self, text: str, depth: int, plural_value: Any = None) -> str:
        parts: List[str] = []
        index, length = 0, len(text)

        while index < length:
            char = text[index]
            if char == "{":
                end = _find_closing(text, index)
                if end < 0:
                    raise _PatternSyntaxError("unterminated '{'", index)
                parts.append(self._render_block(text[index : end + 1], depth, plural_value))
                index = end + 1
            elif char == "#" and plural_value is not None:
                parts.append(format_value(plural_value))
                index += 1
            else:
                stop = index + 1
                while stop < length and text[stop] != "{" and text[stop] != "#":
                    stop += 1
                parts.append(text[index:stop])
                index = stop

        return "".join(parts)

    def _tick(self) -> None:
        self.iterations += 1
        if self.iterations > self.options.max_iterations:
            raise _IterationLimitExceeded()

    def _render_block(self, raw: str, depth: int, plural_value: Any) -> str:
        self._tick()
        name, separator, rest = raw[1:-1].partition(",")
        name = name.strip()

        if not separator:
            if _ARGUMENT_NAME.match(name) and name in self.params:
                return format_value(self.params[name])
            return raw

        block_type, separator, branch_source = rest.partition(",")
        block_type = block_type.strip()
        if block_type not in _BLOCK_TYPES or not _ARGUMENT_NAME.match(name):
            return raw

        if depth >= self.options.max_nesting_depth:
            if not self.depth_reported:
                self.depth_reported = True
                _report(
                    self.options,
                    FormatError(
                        FormatErrorKind.MAX_DEPTH_EXCEEDED,
                        f"nesting depth exceeds maximum of {self.options.max_nesting_depth}",
                    ),
                )
            return raw

        if not separator:
            raise _PatternSyntaxError(f"{block_type} block {name!r} has no branches")
        branches = _parse_branches(branch_source)

        if name not in self.params:
            return raw

        value = self.params[name]
        if block_type == "plural":
            return self._render_plural(raw, name, value, branches, depth)
        return self._render_select(raw, value, branches, depth, plural_value)

    def _render_plural(
        self,
        raw: str,
        name: str,
        value: Any,
        branches: List[Tuple[str, str]],
        depth: int,
    ) -> str:
        number = _to_number(value)
        if number is None:
            _report(
                self.options,
                FormatError(
                    FormatErrorKind.INVALID_ARGUMENT,
                    f"plural argument {name!r} is not a finite number",
                ),
            )
            return raw

        for selector, content in branches:
            if selector.startswith("="):
                exact = _parse_exact(selector)
                if exact is not None and number == exact:
                    return self.render(content, depth + 1, number)

        try:
            category = get_plural_category(
                number,
                self.options.locale,
                self.options.plural_cache,
                self.options.plural_fallback_locale,
            )
        except (ValueError, ArithmeticError) as e:
            logger.debug("plural_category_unavailable", argument=name, error=str(e))
            category = "other"
        content = _pick(branches, category)
        if content is None:
            content = _pick(branches, "other")
        if content is None:
            return raw
        return self.render(content, depth + 1, number)

    def _render_select(
        self,
        raw: str,
        value: Any,
        branches: List[Tuple[str, str]],
        depth: int,
        plural_value: Any,
    ) -> str:
        content = _pick(branches, format_value(value))
        if content is None:
            content = _pick(branches, "other")
        if content is None:
            return raw
        return self.render(content, depth + 1, plural_value)


def interpolate(text: str, params: Optional[Params] = None) -> str:
    """Replace top-level ``{name}`` placeholders in a single pass.

    Values are inserted literally; placeholders without a value are kept.
    """
    if not params:
        return text

    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name in params:
            return format_value(params[name])
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, text)


def format_message(
    pattern: str,
    params: Optional[Params] = None,
    options: Optional[FormatOptions] = None,
) -> str:
    """Format a message pattern with interpolation parameters.

    Args:
        pattern: Message pattern (plain text, placeholders, plural/select blocks).
        params: Values for the pattern's arguments.
        options: Locale, limits and error callback.

    Returns:
        Formatted text. Never raises for malformed or oversized patterns.
    """
    options = options or FormatOptions()

    if len(pattern) > options.max_text_length:
        _report(
            options,
            FormatError(
                FormatErrorKind.TEXT_TOO_LONG,
                f"pattern length {len(pattern)} exceeds maximum of "
                f"{options.max_text_length}; truncated",
            ),
        )
        pattern = pattern[: options.max_text_length]

    if not params or "{" not in pattern:
        return pattern

    try:
        return _Renderer(params, options).render(pattern, 0)
    except _IterationLimitExceeded:
        _report(
            options,
            FormatError(
                FormatErrorKind.MAX_ITERATIONS_EXCEEDED,
                f"pattern requires more than {options.max_iterations} block resolutions",
            ),
        )
    except _PatternSyntaxError as e:
        _report(
            options,
            FormatError(FormatErrorKind.PARSE_ERROR, f"malformed pattern: {e}", e.position),
        )
    return interpolate(pattern, params)


class MessageFormatter:
    """Formatter bound to configured limits and a shared plural rule cache.

    Attributes:
        plural_cache: Plural rule cache shared by every format call.
        default_locale: Locale used when a call does not name one.
    """

    def __init__(
        self,
        plural_cache: Optional[PluralCategoryCache] = None,
        settings: Optional[Settings] = None,
        default_locale: Optional[str] = None,
    ):
        settings = settings or get_settings()
        self.plural_cache = (
            plural_cache if plural_cache is not None else create_plural_cache(settings=settings)
        )
        self.default_locale = default_locale or settings.locales.default_locale
        self.max_nesting_depth = settings.formatter.max_nesting_depth
        self.max_text_length = settings.formatter.max_text_length
        self.max_iterations = settings.formatter.max_iterations
        self.plural_fallback_locale = settings.plurals.fallback_locale

    def options_for(
        self, locale: Optional[str] = None, on_error: Optional[ErrorCallback] = None
    ) -> FormatOptions:
        return FormatOptions(
            locale=locale or self.default_locale,
            plural_cache=self.plural_cache,
            max_nesting_depth=self.max_nesting_depth,
            max_text_length=self.max_text_length,
            max_iterations=self.max_iterations,
            on_error=on_error,
            plural_fallback_locale=self.plural_fallback_locale,
        )

    def format(
        self,
        pattern: str,
        params: Optional[Params] = None,
        *,
        locale: Optional[str] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> str:
        return format_message(pattern, params, self.options_for(locale, on_error))


@lru_cache
def get_default_formatter() -> MessageFormatter:
    """Get the process-wide formatter used outside an explicit runtime."""
    return MessageFormatter()
