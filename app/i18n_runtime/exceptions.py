"""Custom exceptions for the translation runtime.

Only ``ValidationError`` and ``StorageError`` ever reach callers. Format and
cache backend errors are recovered where they happen and are only observable
through logs and ``on_error`` callbacks.
"""

from enum import Enum
from typing import Optional


class I18nError(Exception):
    """Base exception for all translation runtime errors.

    Example:
        try:
            scope = await runtime.create_scope("pt-BR")
        except I18nError as e:
            logger.error("scope_creation_failed", error=str(e))
    """

    pass


class ValidationError(I18nError, ValueError):
    """Raised at the boundary when input exceeds a declared size or shape limit.

    Example:
        >>> assert_valid_locale("english")
        Traceback (most recent call last):
        ...
        ValidationError: Invalid locale: locale "english" is not a valid BCP 47 locale code
    """

    pass


class FormatErrorKind(str, Enum):
    """Reasons the message formatter degraded its output."""

    TEXT_TOO_LONG = "text_too_long"
    MAX_DEPTH_EXCEEDED = "max_depth_exceeded"
    MAX_ITERATIONS_EXCEEDED = "max_iterations_exceeded"
    PARSE_ERROR = "parse_error"
    INVALID_ARGUMENT = "invalid_argument"


class FormatError(I18nError):
    """Pattern parse failure or security-limit violation inside the formatter.

    Never raised to formatter callers; delivered to ``on_error`` callbacks.

    Attributes:
        kind: Category of the failure.
        position: Character offset in the pattern, when known.
    """

    def __init__(
        self, kind: FormatErrorKind, message: str, position: Optional[int] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.position = position

    @property
    def message(self) -> str:
        return str(self)


class CacheBackendError(I18nError):
    """Failure reported by an external cache backing store.

    Always recovered inside the cache layer as a miss, no-op, or ``False``.
    """

    pass


class StorageError(I18nError):
    """Failure of the storage collaborator while loading translation maps.

    Surfaced to whatever orchestrates scope creation.
    """

    def __init__(self, message: str, locale: Optional[str] = None):
        super().__init__(message)
        self.locale = locale
