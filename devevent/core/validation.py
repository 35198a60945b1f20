"""Field predicates shared by the record managers and request parsing."""

import re
from typing import Any

__all__ = ["EMAIL_PATTERN", "is_non_empty_string", "is_non_empty_string_array", "is_valid_email"]

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def is_non_empty_string(value: Any) -> bool:
    """True iff ``value`` is a string with at least one non-whitespace character."""
    return isinstance(value, str) and len(value.strip()) > 0


def is_non_empty_string_array(value: Any) -> bool:
    """True iff ``value`` is a list/tuple of one or more non-empty strings."""
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and all(is_non_empty_string(item) for item in value)
    )


def is_valid_email(value: Any) -> bool:
    """Basic ``local@domain.tld`` shape check, no whitespace anywhere."""
    return is_non_empty_string(value) and EMAIL_PATTERN.fullmatch(value.strip()) is not None
