"""Flickr public search page scraper."""

from __future__ import annotations

import re
from typing import List

from bs4 import BeautifulSoup

from core.models import ImageRecord, make_record_id
from search.base import BaseSource
from utils.log_config import get_logger

log = get_logger(__name__)

_PHOTO_RE = re.compile(r'"url":"(https:(?:\\/\\/|//)live\.staticflickr\.com[^"]+)"')
_SIZE_SUFFIX = re.compile(r"_[a-z]\.jpg$")


class FlickrSource(BaseSource):
    name = "flickr"

    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        log.debug("Flickr ← %s", query)
        resp = self.get(
            "https://www.flickr.com/search/",
            params={"text": query, "safe_search": "1"},
        )
        soup = BeautifulSoup(resp.text, "html.parser")
        records: List[ImageRecord] = []

        for script in soup.find_all("script"):
            content = script.string or ""
            if "modelExport" not in content:
                continue
            for i, raw in enumerate(_PHOTO_RE.findall(content)[:max_results]):
                thumb = raw.replace("\\/", "/")
                records.append(
                    ImageRecord(
                        id=make_record_id(self.name, i),
                        url=_SIZE_SUFFIX.sub("_b.jpg", thumb),  # large size
                        thumbnail=thumb,
                        title=f"{query} - Flickr Photo {i + 1}",
                        source=self.name,
                        source_url=resp.url,
                    )
                )
            break

        return records
