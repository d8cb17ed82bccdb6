"""Content-addressed lookup keys for source strings.

Keys are persisted as storage identifiers, so the algorithm here is a schema
contract: changing it requires migrating every stored translation.
"""

import re
from typing import Optional

KEY_LENGTH = 8
KEY_PATTERN = re.compile(r"^[0-9a-f]{8}$")

_DJB_SEED = 5381
_DJB_MULTIPLIER = 33
_UINT32_MASK = 0xFFFFFFFF


def djb33x(value: str) -> int:
    """DJB2 variant with XOR combine, folded to an unsigned 32-bit integer.

    Iterates UTF-16 code units so astral characters hash as surrogate pairs,
    which keeps keys identical to the ones produced by JavaScript clients.

    Args:
        value: String to hash.

    Returns:
        Unsigned 32-bit hash.
    """
    result = _DJB_SEED
    data = value.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        result = ((result * _DJB_MULTIPLIER) ^ code_unit) & _UINT32_MASK
    return result


def derive_key(text: str, context: Optional[str] = None) -> str:
    """Derive the stable lookup key for a source string.

    Surrounding whitespace is ignored. A non-empty context disambiguates
    identical text used in different places.

    Args:
        text: Source text.
        context: Optional disambiguation context (e.g. "button", "menu").

    Returns:
        8-character lowercase hexadecimal key.

    Example:
        >>> derive_key("Submit") != derive_key("Submit", "form")
        True
        >>> derive_key("  Submit  ") == derive_key("Submit")
        True
    """
    trimmed = text.strip()
    hashed_input = f"{context}::{trimmed}" if context else trimmed
    return format(djb33x(hashed_input), "08x")


def is_valid_key(value: str) -> bool:
    """Check whether a value has the persisted key format."""
    return isinstance(value, str) and KEY_PATTERN.match(value) is not None
