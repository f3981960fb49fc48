"""
All configuration — flags, knobs, source tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Tuple

from utils.exceptions import ConfigurationError

ROOT_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = ROOT_DIR / "data"


VERBOSE_LOGGING         = False
ENABLE_HEALTH_MONITOR   = True
SHUFFLE_RESULTS         = True


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  SOURCES
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

# Order matters: the orchestrator concatenates results in this order,
# which decides which duplicate survives deduplication.
KNOWN_SOURCES: Tuple[str, ...] = (
    "google", "bing", "flickr", "unsplash",
    "zillow", "redfin",
    "loc", "wikimedia", "archive", "nypl", "maps",
)

SOURCE_LABELS: Dict[str, str] = {
    "google":    "Google",
    "bing":      "Bing",
    "flickr":    "Flickr",
    "unsplash":  "Unsplash",
    "zillow":    "Zillow",
    "redfin":    "Redfin",
    "loc":       "Library of Congress",
    "wikimedia": "Wikimedia Commons",
    "archive":   "Internet Archive",
    "nypl":      "NYPL",
    "maps":      "Historical Maps",
}

HISTORICAL_SOURCES: FrozenSet[str] = frozenset({"loc", "archive", "nypl", "maps"})

DEFAULT_SOURCES: Tuple[str, ...] = (
    "google", "bing", "flickr", "unsplash", "loc", "wikimedia", "archive",
)


@dataclass(frozen=True)
class SearchConfig:
    default_sources:   Tuple[str, ...] = DEFAULT_SOURCES
    per_source_limit:  int             = 12
    request_timeout:   float           = 15.0
    max_workers:       int             = len(KNOWN_SOURCES)
    aggregate_timeout: Optional[float] = None     # None → wait for every adapter
    poll_interval:     float           = 0.25


@dataclass(frozen=True)
class PathConfig:
    root:       Path = DATA_DIR
    log_file:   Path = DATA_DIR / "logs" / "locationspy.log"
    export_dir: Path = DATA_DIR / "exports"

    def ensure(self) -> None:
        for d in (self.log_file.parent, self.export_dir):
            d.mkdir(parents=True, exist_ok=True)


@dataclass
class AppConfig:
    paths:  PathConfig   = field(default_factory=PathConfig)
    search: SearchConfig = field(default_factory=SearchConfig)

    verbose:       bool = VERBOSE_LOGGING
    enable_health: bool = ENABLE_HEALTH_MONITOR
    shuffle:       bool = SHUFFLE_RESULTS

    def validate(self) -> None:
        for name in self.search.default_sources:
            if name not in KNOWN_SOURCES:
                raise ConfigurationError(f"Unknown default source: {name}")
        if self.search.per_source_limit < 1:
            raise ConfigurationError("per_source_limit must be >= 1")
        if self.search.max_workers < 1:
            raise ConfigurationError("max_workers must be >= 1")
        if self.search.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be > 0")
        timeout = self.search.aggregate_timeout
        if timeout is not None and timeout <= 0:
            raise ConfigurationError("aggregate_timeout must be > 0 or None")


cfg = AppConfig()


DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "DNT": "1",
    "Connection": "keep-alive",
}
