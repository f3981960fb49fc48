"""
Records passed between adapters, the orchestrator and the
downstream stages.  Nothing here is persisted.
"""

from __future__ import annotations

import hashlib
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config.settings import SOURCE_LABELS

CANCELLED = "cancelled"


def make_record_id(source: str, key: Any) -> str:
    """Opaque id — unique within one run, never stable across runs."""
    return f"{source}-{key}-{uuid.uuid4().hex[:8]}"


def url_key(url: str) -> str:
    """Short digest of *url*, used to build readable default ids."""
    return hashlib.md5(url.encode("utf-8")).hexdigest()[:10]


def canonical_url(url: str) -> str:
    """``url`` with everything from the first ``?`` onward removed."""
    return url.split("?", 1)[0]


@dataclass(frozen=True)
class ImageRecord:
    """One image found by one source."""

    url:           str
    source:        str
    source_url:    str = ""
    title:         str = ""
    id:            str = ""
    thumbnail:     str = ""
    year:          Optional[int]  = None
    date:          Optional[str]  = None
    is_historical: Optional[bool] = None
    width:         int = 0
    height:        int = 0

    def __post_init__(self) -> None:
        # frozen → fill derived defaults through object.__setattr__
        if not self.thumbnail:
            object.__setattr__(self, "thumbnail", self.url)
        if not self.title or not self.title.strip():
            label = SOURCE_LABELS.get(self.source, self.source)
            object.__setattr__(self, "title", f"{label} image")
        if not self.id:
            object.__setattr__(self, "id", make_record_id(self.source, url_key(self.url)))
        if not self.source_url:
            object.__setattr__(self, "source_url", self.url)
        if self.is_historical is None and self.year is not None:
            object.__setattr__(self, "is_historical", self.year < 2000)

    @property
    def canonical_url(self) -> str:
        return canonical_url(self.url)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id":        self.id,
            "url":       self.url,
            "thumbnail": self.thumbnail,
            "title":     self.title,
            "source":    self.source,
            "sourceUrl": self.source_url,
        }
        if self.width:
            data["width"] = self.width
        if self.height:
            data["height"] = self.height
        if self.year is not None:
            data["year"] = self.year
        if self.date:
            data["date"] = self.date
        if self.is_historical is not None:
            data["isHistorical"] = self.is_historical
        return data


@dataclass(frozen=True)
class SourceOutcome:
    """
    What one adapter call produced.

    ``error`` is ``None`` on success.  A failed call still yields an
    outcome — with no records — so failures are data, not exceptions.
    """

    source:  str
    records: List[ImageRecord] = field(default_factory=list)
    error:   Optional[str]     = None
    elapsed: float             = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, source: str, error: str, elapsed: float = 0.0) -> "SourceOutcome":
        return cls(source=source, records=[], error=error, elapsed=elapsed)


@dataclass
class TimelinePeriod:
    label:      str
    start_year: int
    end_year:   int
    images:     List[ImageRecord] = field(default_factory=list)
    undated:    bool = False

    @property
    def is_undated(self) -> bool:
        return self.undated

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label":     self.label,
            "startYear": self.start_year,
            "endYear":   self.end_year,
            "images":    [img.to_dict() for img in self.images],
        }


@dataclass
class AggregateResult:
    """Final response handed to the presentation layer."""

    query:     str
    images:    List[ImageRecord]  = field(default_factory=list)
    outcomes:  List[SourceOutcome] = field(default_factory=list)
    elapsed:   float = 0.0
    cancelled: bool  = False

    @property
    def count(self) -> int:
        return len(self.images)

    @property
    def sources(self) -> List[str]:
        """Distinct sources represented in ``images``, first-seen order."""
        seen: Dict[str, None] = {}
        for img in self.images:
            seen.setdefault(img.source, None)
        return list(seen)

    @property
    def source_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for img in self.images:
            counts[img.source] = counts.get(img.source, 0) + 1
        return counts

    @property
    def failed_sources(self) -> List[str]:
        return [o.source for o in self.outcomes if not o.ok]

    @property
    def has_historical(self) -> bool:
        return any(img.is_historical or img.year for img in self.images)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query":        self.query,
            "images":       [img.to_dict() for img in self.images],
            "count":        self.count,
            "sources":      self.sources,
            "sourceCounts": self.source_counts,
        }
