"""Zillow listing-page scraper."""

from __future__ import annotations

import re
import urllib.parse
from typing import List, Set

from bs4 import BeautifulSoup

from core.models import ImageRecord, make_record_id
from search.base import BaseSource
from utils.log_config import get_logger

log = get_logger(__name__)

_IMG_SRC_RE = re.compile(r'"imgSrc":"(https://[^"]+)"')
_SKIP = ("logo", "icon")


class ZillowSource(BaseSource):
    name = "zillow"

    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        log.debug("Zillow ← %s", query)
        slug = urllib.parse.quote(re.sub(r"\s+", "-", query))
        search_url = f"https://www.zillow.com/homes/{slug}_rb/"
        resp = self.get(search_url)
        soup = BeautifulSoup(resp.text, "html.parser")

        seen: Set[str] = set()
        records: List[ImageRecord] = []

        def add(url: str, thumb: str, title: str) -> None:
            if url in seen or len(records) >= max_results:
                return
            seen.add(url)
            records.append(
                ImageRecord(
                    id=make_record_id(self.name, len(records)),
                    url=url,
                    thumbnail=thumb,
                    title=title,
                    source=self.name,
                    source_url=search_url,
                )
            )

        # property data embedded in scripts
        for script in soup.find_all("script"):
            content = script.string or ""
            if "zpid" not in content and "imgSrc" not in content:
                continue
            for thumb in _IMG_SRC_RE.findall(content):
                full = re.sub(r"_[a-z]\.jpg", "_f.jpg", thumb)
                add(full, thumb, f"{query} - Zillow Property {len(records) + 1}")

        # property cards
        for img in soup.select('img[src*="zillowstatic.com"], img[src*="zillow.com"]'):
            src = img.get("src", "")
            if not src or any(s in src for s in _SKIP):
                continue
            add(src, src, img.get("alt") or f"{query} - Zillow {len(records) + 1}")

        return records
