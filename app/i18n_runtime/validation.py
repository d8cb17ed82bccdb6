"""Input validation applied at the boundary, before data reaches the runtime.

Oversized or malformed input is rejected, never silently truncated.

Usage:
    from i18n_runtime.validation import assert_valid_locale, validate_text

    assert_valid_locale("pt-BR")
    result = validate_text(user_input)
    if not result.valid:
        logger.warning("rejected_source_text", error=result.error)
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from i18n_runtime.configuration import ValidationSettings
from i18n_runtime.exceptions import ValidationError
from i18n_runtime.logging import get_module_logger
from i18n_runtime.models import SourceString

logger = get_module_logger()

_LIMITS = ValidationSettings()

MAX_TEXT_LENGTH = _LIMITS.max_source_text_length
MAX_LOCALE_LENGTH = _LIMITS.max_locale_length
MAX_CONTEXT_LENGTH = _LIMITS.max_context_length
MAX_HASH_LENGTH = _LIMITS.max_hash_length
MAX_BATCH_SIZE = _LIMITS.max_batch_size

# language[-Script][-REGION], region either two letters or a UN M.49 code
_BCP47 = re.compile(r"^[a-z]{2,3}(-[a-z]{4})?(-([a-z]{2}|\d{3}))?$", re.IGNORECASE)
_ALPHANUMERIC = re.compile(r"^[a-zA-Z0-9]+$")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None


_OK = ValidationResult(valid=True)


def validate_text(text: Any, max_length: int = MAX_TEXT_LENGTH) -> ValidationResult:
    """Validate source text for ingestion.

    Args:
        text: Candidate source text.
        max_length: Maximum allowed length in characters.

    Returns:
        ValidationResult describing the first violation found.
    """
    if not isinstance(text, str):
        return ValidationResult(False, "text must be a string")
    if len(text) > max_length:
        return ValidationResult(False, f"text exceeds maximum length {max_length}")
    return _OK


def validate_locale(locale: Any, max_length: int = MAX_LOCALE_LENGTH) -> ValidationResult:
    """Validate a BCP 47 locale code such as ``en``, ``zh-Hant-TW`` or ``es-419``.

    Args:
        locale: Candidate locale code.
        max_length: Maximum allowed length in characters.

    Returns:
        ValidationResult describing the first violation found.
    """
    if not isinstance(locale, str) or not locale:
        return ValidationResult(False, "locale cannot be empty")
    if len(locale) > max_length:
        return ValidationResult(False, f"locale exceeds maximum length {max_length}")
    if not _BCP47.match(locale):
        return ValidationResult(
            False, f'locale "{locale}" is not a valid BCP 47 locale code'
        )
    return _OK


def validate_context(
    context: Any, max_length: int = MAX_CONTEXT_LENGTH
) -> ValidationResult:
    """Validate an optional disambiguation context. ``None`` is valid."""
    if context is None:
        return _OK
    if not isinstance(context, str):
        return ValidationResult(False, "context must be a string")
    if len(context) > max_length:
        return ValidationResult(False, f"context exceeds maximum length {max_length}")
    return _OK


def validate_hash(value: Any, max_length: int = MAX_HASH_LENGTH) -> ValidationResult:
    """Validate a lookup key received from outside the runtime."""
    if not isinstance(value, str) or not value:
        return ValidationResult(False, "hash cannot be empty")
    if len(value) > max_length:
        return ValidationResult(False, f"hash exceeds maximum length {max_length}")
    if not _ALPHANUMERIC.match(value):
        return ValidationResult(False, "hash must be alphanumeric")
    return _OK


def validate_batch_size(size: int, max_size: int = MAX_BATCH_SIZE) -> ValidationResult:
    if size > max_size:
        return ValidationResult(False, f"batch size exceeds maximum {max_size}")
    return _OK


def _raise_if_invalid(kind: str, result: ValidationResult) -> None:
    if not result.valid:
        raise ValidationError(f"Invalid {kind}: {result.error}")


def assert_valid_text(text: Any, max_length: int = MAX_TEXT_LENGTH) -> None:
    _raise_if_invalid("input", validate_text(text, max_length))


def assert_valid_locale(locale: Any, max_length: int = MAX_LOCALE_LENGTH) -> None:
    _raise_if_invalid("locale", validate_locale(locale, max_length))


def assert_valid_context(context: Any, max_length: int = MAX_CONTEXT_LENGTH) -> None:
    _raise_if_invalid("context", validate_context(context, max_length))


def assert_valid_hash(value: Any, max_length: int = MAX_HASH_LENGTH) -> None:
    _raise_if_invalid("hash", validate_hash(value, max_length))


def assert_valid_batch_size(size: int, max_size: int = MAX_BATCH_SIZE) -> None:
    _raise_if_invalid("batch", validate_batch_size(size, max_size))


@dataclass
class CollisionReport:
    """Outcome of registering a batch of source strings.

    Attributes:
        entries: Unique source strings keyed by hash, first occurrence kept.
        collisions: Hash -> distinct texts that derived the same key.
        warnings: Human-readable collision descriptions.
    """

    entries: Dict[str, SourceString] = field(default_factory=dict)
    collisions: Dict[str, List[str]] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def has_collisions(self) -> bool:
        return bool(self.collisions)


def check_source_collisions(sources: Iterable[SourceString]) -> CollisionReport:
    """Detect hash collisions while registering source strings.

    Duplicates (same hash, same trimmed text and context) are dropped
    silently. Different text or context under an existing hash is reported
    and the later string is skipped.

    Args:
        sources: Source strings in registration order.

    Returns:
        CollisionReport with the deduplicated entries.
    """
    report = CollisionReport()

    for source in sources:
        existing = report.entries.get(source.hash)
        if existing is None:
            report.entries[source.hash] = source
            continue
        if (existing.text.strip(), existing.context) == (
            source.text.strip(),
            source.context,
        ):
            continue

        texts = report.collisions.setdefault(source.hash, [existing.text])
        if source.text not in texts:
            texts.append(source.text)
        message = (
            f'Hash collision on {source.hash}: "{existing.text}" and "{source.text}"'
        )
        report.warnings.append(message)
        logger.warning(
            "source_hash_collision",
            hash=source.hash,
            kept=existing.text,
            skipped=source.text,
            kept_context=existing.context,
            skipped_context=source.context,
        )

    return report
