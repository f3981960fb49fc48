"""Library of Congress prints & photographs (JSON API)."""

from __future__ import annotations

from typing import List, Optional

from core.models import ImageRecord, make_record_id
from search.base import BaseSource, extract_year
from utils.log_config import get_logger

log = get_logger(__name__)


def _absolute(url: Optional[str]) -> Optional[str]:
    if url and url.startswith("//"):
        return f"https:{url}"
    return url


class LibraryOfCongressSource(BaseSource):
    name = "loc"
    historical = True

    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        log.debug("LoC ← %s", query)
        resp = self.get(
            "https://www.loc.gov/pictures/search/",
            params={"q": query, "fo": "json", "c": 20},
        )
        data = resp.json()
        records: List[ImageRecord] = []

        for item in (data.get("results") or [])[:max_results]:
            image = item.get("image") or {}
            url = _absolute(image.get("full") or image.get("thumb"))
            if not url:
                continue
            date = item.get("date") or None
            records.append(
                ImageRecord(
                    id=make_record_id(self.name, item.get("pk", len(records))),
                    url=url,
                    thumbnail=_absolute(image.get("thumb")) or url,
                    title=item.get("title") or f"{query} - Historical",
                    source=self.name,
                    source_url=f"https://www.loc.gov{item.get('link') or ''}",
                    year=extract_year(date),
                    date=date,
                    is_historical=True,
                )
            )

        return records
