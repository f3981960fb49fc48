"""
URL-based deduplication across sources.

Two records are the same image iff their URLs match once the query
string is dropped.  No scheme/host case-folding or other URL
normalization happens here.
"""

from __future__ import annotations

from typing import Iterable, List, Set

from core.models import ImageRecord, canonical_url
from utils.log_config import get_logger

log = get_logger(__name__)


def deduplicate(records: Iterable[ImageRecord]) -> List[ImageRecord]:
    """
    Single pass in input order; the first record for a canonical URL
    wins regardless of which source produced it.
    """
    seen: Set[str] = set()
    unique: List[ImageRecord] = []
    total = 0

    for rec in records:
        total += 1
        key = canonical_url(rec.url)
        if key in seen:
            continue
        seen.add(key)
        unique.append(rec)

    if total != len(unique):
        log.debug("Dedup: %d → %d records", total, len(unique))
    return unique
