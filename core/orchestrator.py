"""
Fans one query out to every enabled source in parallel and collects
whatever comes back.

Sources fail independently; a failed or slow source never blocks the
others.  The caller may abandon outstanding sources with a cancel event
or a deadline and still get the partial results.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Dict, Iterable, List, Mapping, Optional

from config.settings import SearchConfig
from core.health import HealthMonitor
from core.models import CANCELLED, AggregateResult, ImageRecord, SourceOutcome
from search.base import BaseSource
from search.registry import build_sources
from utils.exceptions import InvalidInputError
from utils.log_config import get_logger

log = get_logger(__name__)

class Orchestrator:
    """
    Instantiate once → reuse across requests.
    Holds adapters only; every ``aggregate`` call is independent.
    """

    def __init__(
        self,
        cfg: SearchConfig,
        sources: Optional[Mapping[str, BaseSource]] = None,
        monitor: Optional[HealthMonitor] = None,
    ) -> None:
        self.cfg = cfg
        self.sources: Dict[str, BaseSource] = dict(
            sources if sources is not None else build_sources(cfg)
        )
        self.monitor = monitor

    # ── source selection ────────────────────────────────────
    def resolve_sources(self, enabled: Optional[Iterable[str]]) -> List[str]:
        """Known identifiers from *enabled*, in registry order."""
        requested = set(enabled or ()) or set(self.cfg.default_sources)
        unknown = requested - set(self.sources)
        if unknown:
            log.debug("Ignoring unknown sources: %s", ", ".join(sorted(unknown)))
        return [name for name in self.sources if name in requested]

    # ── main entry ──────────────────────────────────────────
    def aggregate(
        self,
        query: str,
        enabled_sources: Optional[Iterable[str]] = None,
        *,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> AggregateResult:
        if not query or not query.strip():
            raise InvalidInputError("Location is required")

        names = self.resolve_sources(enabled_sources)
        t0 = time.monotonic()
        timeout = timeout if timeout is not None else self.cfg.aggregate_timeout
        deadline = t0 + timeout if timeout is not None else None

        log.info("Aggregating %r from %d sources: %s", query, len(names), ", ".join(names))

        outcomes: Dict[str, SourceOutcome] = {}
        cancelled = False

        if names:
            stop = threading.Event()
            pool = ThreadPoolExecutor(
                max_workers=min(self.cfg.max_workers, len(names)),
                thread_name_prefix="source",
            )
            pending: Dict[Future, str] = {
                pool.submit(
                    self.sources[name].safe_fetch, query, self.cfg.per_source_limit,
                    deadline=deadline, stop=stop,
                ): name
                for name in names
            }
            try:
                while pending:
                    if cancel is not None and cancel.is_set():
                        cancelled = True
                        break
                    wait_for = self.cfg.poll_interval
                    if deadline is not None:
                        remaining = deadline - time.monotonic()
                        if remaining <= 0:
                            cancelled = True
                            break
                        wait_for = min(wait_for, remaining)

                    done, _ = wait(list(pending), timeout=wait_for, return_when=FIRST_COMPLETED)
                    for fut in done:
                        name = pending.pop(fut)
                        outcomes[name] = self._collect(name, fut)
            finally:
                # running adapters bail out before their next request
                stop.set()
                pool.shutdown(wait=False, cancel_futures=True)

            # a source can hit the deadline itself just before the loop does
            cancelled = cancelled or any(o.error == CANCELLED for o in outcomes.values())
            if cancelled:
                log.warning(
                    "Aggregation cancelled — abandoning %d source(s): %s",
                    len(pending), ", ".join(pending.values()),
                )
                for name in pending.values():
                    outcomes[name] = SourceOutcome.failed(name, CANCELLED)

        ordered = [outcomes[name] for name in names]
        if self.monitor is not None:
            for outcome in ordered:
                self.monitor.record_outcome(outcome)

        records: List[ImageRecord] = []
        for outcome in ordered:
            records.extend(outcome.records)

        elapsed = time.monotonic() - t0
        log.info(
            "Collected %d records from %d/%d sources in %.2fs",
            len(records), sum(1 for o in ordered if o.records), len(names), elapsed,
        )
        return AggregateResult(
            query=query,
            images=records,
            outcomes=ordered,
            elapsed=elapsed,
            cancelled=cancelled,
        )

    @staticmethod
    def _collect(name: str, fut: Future) -> SourceOutcome:
        try:
            return fut.result()
        except Exception as exc:
            # safe_fetch never raises; this catches adapters that bypass it
            log.error("%s broke the adapter contract: %s", name, exc)
            return SourceOutcome.failed(name, str(exc) or type(exc).__name__)
