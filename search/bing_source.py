"""Bing Images scraper."""

from __future__ import annotations

import json
from typing import List

from bs4 import BeautifulSoup

from core.models import ImageRecord, make_record_id
from search.base import BaseSource
from utils.log_config import get_logger

log = get_logger(__name__)


class BingSource(BaseSource):
    name = "bing"

    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        log.debug("Bing ← %s", query)
        resp = self.get(
            "https://www.bing.com/images/search",
            params={"q": query, "safeSearch": "Strict"},
        )
        soup = BeautifulSoup(resp.text, "html.parser")
        records: List[ImageRecord] = []

        for i, anchor in enumerate(soup.select("a.iusc")):
            if len(records) >= max_results:
                break
            try:
                data = json.loads(anchor.get("m", ""))
            except ValueError:
                continue
            murl = data.get("murl")
            if not murl:
                continue
            records.append(
                ImageRecord(
                    id=make_record_id(self.name, i),
                    url=murl,
                    thumbnail=data.get("turl") or murl,
                    title=data.get("t") or self.fallback_title(query, i + 1),
                    source=self.name,
                    source_url=data.get("purl") or resp.url,
                )
            )

        # fallback: plain thumbnails
        if not records:
            for i, img in enumerate(soup.select("img.mimg")):
                if len(records) >= max_results:
                    break
                src = img.get("src") or img.get("data-src")
                if not src or src.startswith("data:"):
                    continue
                records.append(
                    ImageRecord(
                        id=make_record_id(self.name, i),
                        url=src,
                        title=img.get("alt") or self.fallback_title(query, i + 1),
                        source=self.name,
                        source_url=resp.url,
                    )
                )

        return records
