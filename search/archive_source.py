"""Internet Archive image items (advancedsearch JSON)."""

from __future__ import annotations

from typing import Any, List, Optional

from core.models import ImageRecord, make_record_id
from search.base import BaseSource, extract_year
from utils.log_config import get_logger

log = get_logger(__name__)


def _first(value: Any) -> Optional[str]:
    # advancedsearch returns either scalars or lists
    if isinstance(value, list):
        value = value[0] if value else None
    return str(value) if value not in (None, "") else None


class InternetArchiveSource(BaseSource):
    name = "archive"
    historical = True

    def fetch_images(self, query: str, max_results: int) -> List[ImageRecord]:
        log.debug("Archive ← %s", query)
        resp = self.get(
            "https://archive.org/advancedsearch.php",
            params={
                "q": f"{query} mediatype:image",
                "output": "json",
                "rows": 15,
                "fl[]": ["identifier", "title", "date", "year"],
            },
        )
        docs = (resp.json().get("response") or {}).get("docs") or []
        records: List[ImageRecord] = []

        for doc in docs[:max_results]:
            identifier = _first(doc.get("identifier"))
            if not identifier:
                continue
            date = _first(doc.get("date"))
            year = extract_year(_first(doc.get("year"))) or extract_year(date)
            records.append(
                ImageRecord(
                    id=make_record_id(self.name, identifier),
                    url=f"https://archive.org/download/{identifier}/{identifier}.jpg",
                    thumbnail=f"https://archive.org/download/{identifier}/__ia_thumb.jpg",
                    title=_first(doc.get("title")) or f"{query} - Archive",
                    source=self.name,
                    source_url=f"https://archive.org/details/{identifier}",
                    year=year,
                    date=date,
                    is_historical=True,
                )
            )

        return records
