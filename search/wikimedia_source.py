"""Wikimedia Commons file search (MediaWiki API)."""

from __future__ import annotations

import re
import urllib.parse
from typing import Any, Dict, List, Optional

import requests

from core.models import ImageRecord, make_record_id
from search.base import BaseSource, extract_year
from utils.log_config import get_logger

log = get_logger(__name__)

COMMONS_API_URL = "https://commons.wikimedia.org/w/api.php"

# extmetadata keys checked for a date, best first
_DATE_KEYS = ("DateTimeOriginal", "DateTime")


class WikimediaSource(BaseSource):
    name = "wikimedia"

    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        log.debug("Wikimedia ← %s", query)
        resp = self.get(
            COMMONS_API_URL,
            params={
                "action": "query", "list": "search", "srsearch": query,
                "srnamespace": 6, "srlimit": 15, "format": "json",
            },
        )
        hits = (resp.json().get("query") or {}).get("search") or []

        records: List[ImageRecord] = []
        for hit in hits:
            if len(records) >= max_results:
                break
            title = hit.get("title")
            if not title:
                continue
            # one bad file page must not sink the rest
            try:
                info = self._image_info(title)
            except (requests.RequestException, ValueError) as exc:
                log.debug("Wikimedia imageinfo failed for %s: %s", title, exc)
                continue
            if not info or not info.get("url"):
                continue
            records.append(self._to_record(title, info, len(records)))

        return records

    def _image_info(self, title: str) -> Optional[Dict[str, Any]]:
        resp = self.get(
            COMMONS_API_URL,
            params={
                "action": "query", "titles": title, "prop": "imageinfo",
                "iiprop": "url|extmetadata", "format": "json",
            },
        )
        pages = (resp.json().get("query") or {}).get("pages") or {}
        for page in pages.values():
            infos = page.get("imageinfo") or []
            return infos[0] if infos else None
        return None

    def _to_record(self, title: str, info: Dict[str, Any], idx: int) -> ImageRecord:
        url = info["url"]
        meta = info.get("extmetadata") or {}
        date = None
        for key in _DATE_KEYS:
            value = (meta.get(key) or {}).get("value")
            if value:
                date = value
                break
        year = extract_year(date)
        return ImageRecord(
            id=make_record_id(self.name, idx),
            url=url,
            thumbnail=re.sub(r"/([^/]+)$", r"/thumb/\1/400px-\1", url),
            title=re.sub(r"\.[^.]+$", "", title.replace("File:", "")),
            source=self.name,
            source_url=f"https://commons.wikimedia.org/wiki/{urllib.parse.quote(title)}",
            year=year,
            date=date,
            is_historical=year < 2000 if year is not None else False,
        )
