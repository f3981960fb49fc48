"""Redfin region-page scraper."""

from __future__ import annotations

import json
import re
import urllib.parse
from typing import List, Optional, Set

from bs4 import BeautifulSoup

from core.models import ImageRecord, make_record_id
from search.base import BaseSource
from utils.log_config import get_logger

log = get_logger(__name__)

_PHOTO_RE = re.compile(r'"(https://ssl\.cdn-redfin\.com/photo[^"]+)"')
_SKIP = ("logo", "icon", "avatar")


class RedfinSource(BaseSource):
    name = "redfin"

    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        log.debug("Redfin ← %s", query)
        region_url = self._resolve_region(query)
        resp = self.get(region_url)
        soup = BeautifulSoup(resp.text, "html.parser")

        seen: Set[str] = set()
        records: List[ImageRecord] = []

        for img in soup.select('img[src*="ssl.cdn-redfin.com"], img[src*="redfin.com"]'):
            if len(records) >= max_results:
                break
            src = img.get("src", "")
            if not src or any(s in src for s in _SKIP):
                continue
            large = re.sub(r"_[0-9]+\.", "_0.", src.replace("/genisys.", "/bigphoto."))
            if large in seen:
                continue
            seen.add(large)
            records.append(
                ImageRecord(
                    id=make_record_id(self.name, len(records)),
                    url=large,
                    thumbnail=src,
                    title=img.get("alt") or f"{query} - Redfin Property {len(records) + 1}",
                    source=self.name,
                    source_url=region_url,
                )
            )

        for script in soup.find_all("script"):
            for url in _PHOTO_RE.findall(script.string or ""):
                if len(records) >= max_results:
                    return records
                filename = url.rsplit("/", 1)[-1]
                if any(filename in u for u in seen):
                    continue
                seen.add(url)
                records.append(
                    ImageRecord(
                        id=make_record_id(self.name, len(records)),
                        url=url,
                        title=f"{query} - Redfin Property",
                        source=self.name,
                        source_url=region_url,
                    )
                )

        return records

    def _resolve_region(self, query: str) -> str:
        """Autocomplete lookup; falls back to a guessed city URL."""
        fallback = "https://www.redfin.com/city/0/XX/" + urllib.parse.quote(
            re.sub(r"\s+", "-", query)
        )
        resp = self.get(
            "https://www.redfin.com/stingray/do/location-autocomplete",
            params={"v": "2", "location": query},
        )
        path = self._first_row_url(resp.text)
        return f"https://www.redfin.com{path}" if path else fallback

    @staticmethod
    def _first_row_url(text: str) -> Optional[str]:
        # payload is prefixed with "{}&&"
        try:
            data = json.loads(re.sub(r"^\{\}&&", "", text))
            return data["payload"]["sections"][0]["rows"][0]["url"]
        except (ValueError, KeyError, IndexError, TypeError):
            return None
