"""Utility helpers for string normalization and parsing."""

from __future__ import annotations

import re
from typing import Optional

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
HTTP_SCHEME_PATTERN = re.compile(re.escape("http://"), re.IGNORECASE)

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def slugify(value: str, fallback: str = "image") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def mask_secret(value: Optional[str]) -> str:
    """Show only the edges of a secret so it can be logged."""
    if not value:
        return "missing"
    if len(value) <= 8:
        return "***"
    return f"{value[:4]}...{value[-4:]}"


def upgrade_to_https(url: str) -> str:
    """Rewrite every ``http://`` occurrence to ``https://``, ignoring case."""
    return HTTP_SCHEME_PATTERN.sub("https://", url)


def parse_invariant_int(value: Optional[str]) -> Optional[int]:
    """Parse a 32-bit integer independently of the host locale.

    Accepts surrounding whitespace and a leading sign, nothing else. Digit
    groupings, underscores and non-ASCII digits are rejected. Returns ``None``
    when the value does not parse or does not fit.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not INTEGER_PATTERN.fullmatch(text):
        return None
    number = int(text)
    if number < INT32_MIN or number > INT32_MAX:
        return None
    return number
