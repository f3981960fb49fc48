"""David Rumsey Map Collection search."""

from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup

from core.models import ImageRecord, make_record_id
from search.base import BaseSource, extract_year
from utils.log_config import get_logger

log = get_logger(__name__)

MAX_MAPS = 8


class HistoricalMapsSource(BaseSource):
    name = "maps"
    historical = True

    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        log.debug("Maps ← %s", query)
        resp = self.get(
            "https://www.davidrumsey.com/luna/servlet/as/search",
            params={"q": query, "sort": "Pub_Date,List_No", "lc": "RUMSEY~8~1", "search": "Search"},
        )
        soup = BeautifulSoup(resp.text, "html.parser")
        records: List[ImageRecord] = []

        for i, img in enumerate(soup.select('img[src*="Size0"]')):
            if len(records) >= min(max_results, MAX_MAPS):
                break
            src = img.get("src")
            if not src:
                continue
            title = img.get("alt") or img.get("title") or f"{query} - Historical Map"
            records.append(
                ImageRecord(
                    id=make_record_id(self.name, i),
                    url=src.replace("Size0", "Size2"),
                    thumbnail=src,
                    title=title,
                    source=self.name,
                    source_url=resp.url,
                    year=extract_year(title),
                    is_historical=True,
                )
            )

        return records
