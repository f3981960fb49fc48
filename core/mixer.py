"""Shuffle results so no single source crowds the head of the list."""

from __future__ import annotations

import random
from typing import List, Optional, Sequence

from core.models import ImageRecord


def mix(
    records: Sequence[ImageRecord],
    rng: Optional[random.Random] = None,
) -> List[ImageRecord]:
    """Return a shuffled copy of *records*.  No seed contract."""
    mixed = list(records)
    (rng or random).shuffle(mixed)
    return mixed
