"""
Text cleaning utilities for location queries typed by a user.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from utils.log_config import get_logger

log = get_logger(__name__)

DEFAULT_JUNK: Tuple[str, ...] = (
    "site:", "inurl:", "intitle:", "filetype:",
)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def strip_search_operators(text: str, operators: Tuple[str, ...]) -> str:
    """
    Drop search-engine operator tokens from a query.

    Examples:
        "Boston site:zillow.com"  → "Boston"
        "inurl:photos Main St"    → "Main St"
    """
    kept = []
    for token in text.split():
        lower = token.lower()
        if any(lower.startswith(op) for op in operators):
            continue
        kept.append(token)
    return " ".join(kept)


def clean_location(
    text: Optional[str],
    operators: Optional[Tuple[str, ...]] = None,
) -> str:
    """
    Clean and normalize a location query.

    Steps:
        1. Remove control characters
        2. Remove search operators (site:, inurl:, ...)
        3. Normalize whitespace

    Commas, periods and ``#`` are kept — they carry meaning in addresses
    ("221B Baker St, London", "Apt #4").
    """
    if not text:
        return ""

    cleaned = _CONTROL_CHARS.sub(" ", str(text))
    cleaned = strip_search_operators(cleaned, operators or DEFAULT_JUNK)
    cleaned = re.sub(r"\s+", " ", cleaned).strip(" ,;")

    if cleaned != text:
        log.debug("Query cleaned: %r → %r", text, cleaned)
    return cleaned


def is_valid_query(text: Optional[str]) -> bool:
    """Check if a query value is usable after cleaning."""
    return bool(clean_location(text))
