"""
Per-source bookkeeping across aggregation runs.

Fed with every ``SourceOutcome`` the orchestrator produces.  Purely
informational: a source with a poor record is still queried next time.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict

from core.models import SourceOutcome
from utils.log_config import get_logger

log = get_logger(__name__)


@dataclass
class SourceMetrics:
    calls:    int   = 0
    ok:       int   = 0
    empty:    int   = 0
    failures: int   = 0
    records:  int   = 0
    latency:  float = 0.0
    last_error: str = ""

    def add(self, outcome: SourceOutcome) -> None:
        self.calls += 1
        if not outcome.ok:
            self.failures += 1
            self.last_error = outcome.error or ""
            return
        self.ok += 1
        self.latency += outcome.elapsed
        self.records += len(outcome.records)
        if not outcome.records:
            self.empty += 1

    # averages are over successful calls only
    @property
    def success_rate(self) -> float:
        return self.ok / self.calls if self.calls else 0.0

    @property
    def avg_latency(self) -> float:
        return self.latency / self.ok if self.ok else 0.0

    @property
    def avg_results(self) -> float:
        return self.records / self.ok if self.ok else 0.0


class HealthMonitor:
    """Thread-safe; one instance per pipeline."""

    def __init__(self) -> None:
        self._metrics: Dict[str, SourceMetrics] = {}
        self._lock = threading.Lock()

    def record_outcome(self, outcome: SourceOutcome) -> None:
        with self._lock:
            self._metrics.setdefault(outcome.source, SourceMetrics()).add(outcome)

    def get_report(self) -> Dict[str, Dict]:
        with self._lock:
            return {
                name: {
                    "calls":        m.calls,
                    "success_rate": f"{m.success_rate:.1%}",
                    "avg_latency":  f"{m.avg_latency:.2f}s",
                    "avg_results":  f"{m.avg_results:.1f}",
                    "empty":        m.empty,
                    "failures":     m.failures,
                    "last_error":   m.last_error[:50],
                }
                for name, m in self._metrics.items()
            }

    def log_report(self) -> None:
        report = self.get_report()
        if not report:
            return
        log.info("Source health after %d source(s):", len(report))
        for name, row in report.items():
            log.info(
                "  %-10s │ calls=%-3d │ ok=%-6s │ latency=%-6s │ avg=%-5s │ empty=%d │ failed=%d",
                name,
                row["calls"],
                row["success_rate"],
                row["avg_latency"],
                row["avg_results"],
                row["empty"],
                row["failures"],
            )
