"""Abstract base class every image source inherits from."""

from __future__ import annotations

import re
import threading
import time
from dataclasses import replace
from typing import List, Optional

import requests

from config.settings import DEFAULT_HEADERS, SOURCE_LABELS, SearchConfig
from core.models import CANCELLED, ImageRecord, SourceOutcome
from utils.exceptions import SourceCancelled
from utils.log_config import get_logger

log = get_logger(__name__)

_YEAR_RE = re.compile(r"\b(1[0-9]{3}|20[0-2][0-9])\b")


def extract_year(text: Optional[str]) -> Optional[int]:
    """First plausible 4-digit year in *text* (1000–2029), else ``None``."""
    if not text:
        return None
    match = _YEAR_RE.search(str(text))
    return int(match.group(1)) if match else None


class BaseSource:
    """
    Subclass must set ``name`` and implement ``fetch_images()``.

    ``fetch_images`` may raise; callers go through ``safe_fetch``,
    which never does.
    """

    name: str = "base"
    historical: bool = False

    def __init__(self, cfg: SearchConfig) -> None:
        self.cfg = cfg
        self._local = threading.local()

    @property
    def label(self) -> str:
        return SOURCE_LABELS.get(self.name, self.name)

    # ── thread-local session (connection pooling) ───────────
    @property
    def session(self) -> requests.Session:
        s = getattr(self._local, "session", None)
        if s is None:
            s = requests.Session()
            s.headers.update(DEFAULT_HEADERS)
            self._local.session = s
        return s

    def checkpoint(self) -> Optional[float]:
        """
        Raise ``SourceCancelled`` once the caller has given up on this fetch.

        Returns the seconds left before the deadline, or ``None`` when the
        fetch is unbounded.  Adapters that loop over several requests get
        this for free through ``get()``.
        """
        stop = getattr(self._local, "stop", None)
        if stop is not None and stop.is_set():
            raise SourceCancelled(f"{self.name} abandoned")
        deadline = getattr(self._local, "deadline", None)
        if deadline is None:
            return None
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise SourceCancelled(f"{self.name} ran past the deadline")
        return remaining

    def get(self, url: str, **kwargs) -> requests.Response:
        remaining = self.checkpoint()
        timeout = kwargs.get("timeout", self.cfg.request_timeout)
        kwargs["timeout"] = timeout if remaining is None else min(timeout, remaining)
        resp = self.session.get(url, **kwargs)
        resp.raise_for_status()
        return resp

    # ── override in subclass ────────────────────────────────
    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        raise NotImplementedError

    # ── boundary: every failure becomes an empty outcome ────
    def safe_fetch(
        self,
        query: str,
        max_results: Optional[int] = None,
        *,
        deadline: Optional[float] = None,
        stop: Optional[threading.Event] = None,
    ) -> SourceOutcome:
        """
        ``deadline`` (a ``time.monotonic()`` value) and ``stop`` let the
        caller abandon the fetch; ``get()`` checks both before each request.
        """
        limit = max_results or self.cfg.per_source_limit
        self._local.deadline = deadline
        self._local.stop = stop
        t0 = time.monotonic()
        try:
            raw = self.fetch_images(query, limit)
        except SourceCancelled as exc:
            log.debug("%s", exc)
            return SourceOutcome.failed(self.name, CANCELLED, time.monotonic() - t0)
        except Exception as exc:
            elapsed = time.monotonic() - t0
            log.warning("%s fetch failed: %s", self.name, exc)
            return SourceOutcome.failed(self.name, str(exc) or type(exc).__name__, elapsed)
        finally:
            self._local.deadline = None
            self._local.stop = None

        records = self._normalize(raw or [])[:limit]
        elapsed = time.monotonic() - t0
        log.info("%s → %d records (%.2fs)", self.label, len(records), elapsed)
        return SourceOutcome(source=self.name, records=records, elapsed=elapsed)

    def _normalize(self, raw: List[ImageRecord]) -> List[ImageRecord]:
        out: List[ImageRecord] = []
        for rec in raw:
            if not rec.url or not rec.url.strip():
                continue
            if rec.source != self.name:
                rec = replace(rec, source=self.name)
            if self.historical and not rec.is_historical:
                rec = replace(rec, is_historical=True)
            out.append(rec)
        return out

    def fallback_title(self, query: str, n: int) -> str:
        return f"{query} - {self.label} Image {n}"
