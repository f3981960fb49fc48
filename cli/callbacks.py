"""
Typer callback validators.
"""

from __future__ import annotations

from typing import List, Optional

import typer

from config.settings import KNOWN_SOURCES
from utils.text_cleaner import is_valid_query


def validate_location(value: str) -> str:
    """Reject empty / whitespace-only locations before anything runs."""
    if not is_valid_query(value):
        raise typer.BadParameter("Location must not be empty")
    return value


def validate_sources(sources: Optional[List[str]]) -> Optional[List[str]]:
    """Validate source names; accepts repeated flags or comma lists."""
    if not sources:
        return None
    names: List[str] = []
    for item in sources:
        names.extend(s.strip().lower() for s in item.split(",") if s.strip())
    for name in names:
        if name not in KNOWN_SOURCES:
            raise typer.BadParameter(
                f"Unknown source: {name}. Valid: {', '.join(KNOWN_SOURCES)}"
            )
    return names


def validate_timeout(value: Optional[float]) -> Optional[float]:
    if value is not None and value <= 0:
        raise typer.BadParameter("Timeout must be > 0 seconds")
    return value
