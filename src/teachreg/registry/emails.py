"""Email shape validation and @mention extraction."""

from __future__ import annotations

import re

from teachreg.registry.exceptions import ValidationError

# Basic local@domain.tld shape, no whitespace and a single "@"
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# "@" immediately followed by a well-formed email
MENTION_PATTERN = re.compile(r"@([^\s@]+@[^\s@]+\.[^\s@]+)")


def is_valid_email(value: object) -> bool:
    """Check whether a value is a string shaped like ``local@domain.tld``."""
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None


def validate_email(value: object, role: str = "email") -> str:
    """Return the email unchanged, or raise if it is malformed.

    Args:
        value: Candidate email address.
        role: Entity name used in the error message ("teacher", "student").

    Returns:
        The validated email.

    Raises:
        ValidationError: If the value is not a well-formed email.
    """
    if not is_valid_email(value):
        raise ValidationError(f"Invalid {role} email format: {value}")
    return value  # type: ignore[return-value]


def extract_mentions(text: str) -> list[str]:
    """Extract the emails of ``@email`` mentions, in order, duplicates kept.

    >>> extract_mentions("Hello @a@b.com and @c@d.com")
    ['a@b.com', 'c@d.com']
    """
    return MENTION_PATTERN.findall(text or "")
