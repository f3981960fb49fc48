"""Google Images scraper."""

from __future__ import annotations

import re
from typing import List, Set

from bs4 import BeautifulSoup

from core.models import ImageRecord, make_record_id
from search.base import BaseSource
from utils.log_config import get_logger

log = get_logger(__name__)

_BLOCKED_DOMAINS = frozenset([
    "gstatic.com", "google.com", "googleapis.com",
    "ggpht.com", "googleusercontent.com", "encrypted-tbn",
])

_SCRIPT_URL_RE = re.compile(
    r'\["(https?://[^"]+\.(?:jpg|jpeg|png|webp)[^"]*)"', re.I,
)


class GoogleSource(BaseSource):
    name = "google"

    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        log.debug("Google ← %s", query)
        search_url = "https://www.google.com/search"
        resp = self.get(search_url, params={"q": query, "tbm": "isch", "safe": "active"})
        soup = BeautifulSoup(resp.text, "html.parser")

        seen: Set[str] = set()
        records: List[ImageRecord] = []

        for script in soup.find_all("script"):
            content = script.string or ""
            for m_url in _SCRIPT_URL_RE.findall(content):
                url = self._clean(m_url)
                if not self._valid(url) or url in seen:
                    continue
                seen.add(url)
                records.append(
                    ImageRecord(
                        id=make_record_id(self.name, len(records)),
                        url=url,
                        title=self.fallback_title(query, len(records) + 1),
                        source=self.name,
                        source_url=resp.url,
                    )
                )
                if len(records) >= max_results:
                    return records

        return records

    # ── helpers ─────────────────────────────────────────────
    @staticmethod
    def _clean(url: str) -> str:
        for old, new in (
            ("\\u003d", "="), ("\\u003D", "="),
            ("\\u0026", "&"), ("\\/", "/"),
        ):
            url = url.replace(old, new)
        return url.strip()

    @staticmethod
    def _valid(url: str) -> bool:
        # long URLs are inlined data, not links
        if not url.startswith("http") or len(url) > 500:
            return False
        low = url.lower()
        return not any(d in low for d in _BLOCKED_DOMAINS)
