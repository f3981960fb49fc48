"""NYPL Digital Collections public search page."""

from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup

from core.models import ImageRecord, make_record_id
from search.base import BaseSource, extract_year
from utils.log_config import get_logger

log = get_logger(__name__)

NYPL_BASE = "https://digitalcollections.nypl.org"


class NyplSource(BaseSource):
    name = "nypl"
    historical = True

    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        log.debug("NYPL ← %s", query)
        resp = self.get(f"{NYPL_BASE}/search/index", params={"keywords": query})
        soup = BeautifulSoup(resp.text, "html.parser")
        records: List[ImageRecord] = []

        for i, item in enumerate(soup.select(".result-item, .search-result")):
            if len(records) >= max_results:
                break
            img = item.find("img")
            link = item.find("a")
            src = img and (img.get("src") or img.get("data-src"))
            if not src:
                continue
            href = link.get("href") if link else None
            link_text = link.get_text(strip=True) if link else ""
            records.append(
                ImageRecord(
                    id=make_record_id(self.name, i),
                    url=src.replace("_s.jpg", "_g.jpg").replace("/t/", "/b/"),
                    thumbnail=src,
                    title=img.get("alt") or link_text or f"{query} - NYPL",
                    source=self.name,
                    source_url=f"{NYPL_BASE}{href}" if href else resp.url,
                    year=extract_year(item.get_text(" ")),
                    is_historical=True,
                )
            )

        return records
