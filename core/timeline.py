"""
Groups records into fixed historical periods for the timeline view.

Period table:

    2020s    2020 – current year
    2010s    2010 – 2019
    ...      one row per decade
    1900s    1900 – 1909
    1800s    1800 – 1899
    Earlier     0 – 1799

Records without a year go into a separate "Modern / Unknown Date"
bucket, which sorts as if it started in the current year, so it lands
above the 2020s.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from core.models import ImageRecord, TimelinePeriod

UNDATED_LABEL = "Modern / Unknown Date"
EARLIER_LABEL = "Earlier"

# (label, start, end)
PeriodDef = Tuple[str, int, int]


@dataclass(frozen=True)
class YearRange:
    min: int
    max: int

    @property
    def span(self) -> int:
        return self.max - self.min


def build_periods(current_year: int) -> List[PeriodDef]:
    """Fixed period table, most recent first.  Only the 2020s row moves."""
    periods: List[PeriodDef] = [("2020s", 2020, current_year)]
    for start in range(2010, 1899, -10):
        periods.append((f"{start}s", start, start + 9))
    periods.append(("1800s", 1800, 1899))
    periods.append((EARLIER_LABEL, 0, 1799))
    return periods


def _find_period(year: int, periods: List[PeriodDef]) -> PeriodDef:
    for period in periods:
        if period[1] <= year <= period[2]:
            return period
    # outside the table: future years clamp to the newest row,
    # anything before year 0 to "Earlier"
    return periods[0] if year > periods[0][2] else periods[-1]


def sort_by_year(records: Sequence[ImageRecord]) -> List[ImageRecord]:
    """Year descending, undated last; ties keep input order."""
    return sorted(
        records,
        key=lambda r: (r.year is None, -(r.year if r.year is not None else 0)),
    )


def bucket(
    records: Sequence[ImageRecord],
    current_year: Optional[int] = None,
) -> List[TimelinePeriod]:
    """Assign every record to exactly one period; empty periods are omitted."""
    now = datetime.date.today().year if current_year is None else current_year
    periods = build_periods(now)

    dated: Dict[str, TimelinePeriod] = {}
    undated: Optional[TimelinePeriod] = None

    for rec in sort_by_year(records):
        if rec.year is None:
            if undated is None:
                undated = TimelinePeriod(UNDATED_LABEL, now, now, undated=True)
            undated.images.append(rec)
            continue

        label, start, end = _find_period(rec.year, periods)
        period = dated.get(label)
        if period is None:
            period = dated[label] = TimelinePeriod(label, start, end)
        period.images.append(rec)

    result = list(dated.values())
    if undated is not None:
        result.append(undated)

    # the undated bucket wins a start_year tie (current year 2020)
    result.sort(key=lambda p: (p.start_year, p.undated), reverse=True)
    return result


def year_range(records: Sequence[ImageRecord]) -> Optional[YearRange]:
    years = [r.year for r in records if r.year is not None]
    if not years:
        return None
    return YearRange(min=min(years), max=max(years))
