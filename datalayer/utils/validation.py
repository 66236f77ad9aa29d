"""
Input Validation - checks applied before anything touches a namespace.

Validators return ``(is_valid, error_message)`` so callers decide whether a
failure raises, rejects or is merely logged.
"""

import re
from typing import Any, Optional, Sequence, Tuple

# =============================================================================
# Constants
# =============================================================================

MAX_STRING_LENGTH = 1024


# =============================================================================
# Validation Functions
# =============================================================================


def validate_string(
    value: Any,
    name: str,
    max_length: int = MAX_STRING_LENGTH,
    pattern: Optional[str] = None,
) -> Tuple[bool, str]:
    """
    Validate string input.

    Args:
        value: Value to validate
        name: Field name for errors
        max_length: Maximum string length
        pattern: Optional regex pattern

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    if len(value) > max_length:
        return False, f"{name} exceeds max length {max_length}"

    if pattern and not re.match(pattern, value):
        return False, f"{name} does not match required pattern"

    return True, ""


def validate_key(key: Any) -> Tuple[bool, str]:
    """
    Validate a storage key: a non-empty string.

    Length is not capped; only the namespace quota bounds an entry.
    """
    if not isinstance(key, str):
        return False, f"key must be str, got {type(key).__name__}"

    if not key:
        return False, "key must not be empty"

    return True, ""


def validate_backend_name(name: Any, valid_backends: Sequence[str]) -> Tuple[bool, str]:
    """
    Validate a backend name against the recognized set.

    The error message enumerates every valid backend.
    """
    if name not in valid_backends:
        return False, (
            f"'{name}' is an invalid local storage backend."
            f" Valid backends are: {', '.join(valid_backends)}"
        )
    return True, ""


def validate_quota(value: Any) -> Tuple[bool, str]:
    """Validate a namespace quota in bytes (None disables the limit)."""
    if value is None:
        return True, ""

    if not isinstance(value, int) or isinstance(value, bool):
        return False, f"quota must be int, got {type(value).__name__}"

    if value <= 0:
        return False, f"quota must be > 0, got {value}"

    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_string",
    "validate_key",
    "validate_backend_name",
    "validate_quota",
    "MAX_STRING_LENGTH",
]
