"""
query → clean → orchestrate → deduplicate → mix.

The timeline view consumes the same result through ``timeline()``.
"""

from __future__ import annotations

import threading
import time
from dataclasses import replace
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from config.settings import AppConfig
from core.dedup import deduplicate
from core.health import HealthMonitor
from core.mixer import mix
from core.models import AggregateResult, ImageRecord, TimelinePeriod
from core.orchestrator import Orchestrator
from core.timeline import bucket
from search.base import BaseSource
from utils.exceptions import InvalidInputError
from utils.log_config import get_logger
from utils.text_cleaner import clean_location

log = get_logger(__name__)


class Stats:
    """Counters for one run."""

    def __init__(self, result: AggregateResult, raw_count: int) -> None:
        self.requested = len(result.outcomes)
        self.responded = sum(1 for o in result.outcomes if o.records)
        self.failed    = len(result.failed_sources)
        self.raw       = raw_count
        self.unique    = result.count
        self.elapsed   = result.elapsed
        self.cancelled = result.cancelled

    def report(self) -> str:
        return (
            f"sources={self.responded}/{self.requested} "
            f"failed={self.failed} raw={self.raw} unique={self.unique} "
            f"elapsed={self.elapsed:.2f}s"
            + (" (cancelled)" if self.cancelled else "")
        )


class AggregationPipeline:

    def __init__(
        self,
        cfg: AppConfig,
        sources: Optional[Mapping[str, BaseSource]] = None,
    ) -> None:
        self.cfg = cfg
        cfg.validate()
        self.health = HealthMonitor() if cfg.enable_health else None
        self.orchestrator = Orchestrator(cfg.search, sources=sources, monitor=self.health)
        self.last_stats: Optional[Stats] = None

    def run(
        self,
        query: Optional[str],
        sources: Optional[Iterable[str]] = None,
        *,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        shuffle: Optional[bool] = None,
    ) -> AggregateResult:
        cleaned = clean_location(query)
        if not cleaned:
            raise InvalidInputError("Location is required")

        t0 = time.monotonic()
        raw = self.orchestrator.aggregate(cleaned, sources, timeout=timeout, cancel=cancel)
        images = deduplicate(raw.images)
        do_shuffle = self.cfg.shuffle if shuffle is None else shuffle
        if do_shuffle:
            images = mix(images)

        result = replace(raw, images=images, elapsed=time.monotonic() - t0)
        self.last_stats = Stats(result, raw_count=raw.count)
        log.info("Pipeline: %s", self.last_stats.report())
        return result

    @staticmethod
    def timeline(
        data: Union[AggregateResult, Sequence[ImageRecord]],
        current_year: Optional[int] = None,
    ) -> List[TimelinePeriod]:
        images = data.images if isinstance(data, AggregateResult) else data
        return bucket(images, current_year=current_year)
