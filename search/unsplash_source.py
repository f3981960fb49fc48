"""Unsplash search page scraper."""

from __future__ import annotations

import urllib.parse
from typing import List

from bs4 import BeautifulSoup

from core.models import ImageRecord, make_record_id
from search.base import BaseSource
from utils.log_config import get_logger

log = get_logger(__name__)


class UnsplashSource(BaseSource):
    name = "unsplash"

    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        log.debug("Unsplash ← %s", query)
        search_url = f"https://unsplash.com/s/photos/{urllib.parse.quote(query)}"
        resp = self.get(search_url)
        soup = BeautifulSoup(resp.text, "html.parser")

        records: List[ImageRecord] = []
        seen = set()
        for i, img in enumerate(soup.select("img[srcset]")):
            if len(records) >= max_results:
                break
            srcset = img.get("srcset", "")
            if "unsplash.com" not in srcset:
                continue
            candidates = [part.strip().split(" ")[0] for part in srcset.split(",") if part.strip()]
            if not candidates:
                continue
            url = candidates[-1]    # srcset lists ascending widths
            if url in seen:
                continue
            seen.add(url)
            records.append(
                ImageRecord(
                    id=make_record_id(self.name, i),
                    url=url,
                    thumbnail=candidates[0],
                    title=img.get("alt") or query,
                    source=self.name,
                    source_url=search_url,
                )
            )

        return records
