"""
pricescraper/scraping/aggregation/weekly.py

Rolls price observations into one summary row per material per ISO week.

Grouping
--------
Rows are keyed by ``(material_key, week_start)`` where ``week_start`` is the
Monday (UTC) of the ISO week containing ``scraped_at``. Grouping never looks
at the source, so the result does not depend on the order sources were
processed in.

Statistics
----------
For each currency separately, over the non-null converted prices:

    avg      arithmetic mean, rounded to 2 decimals
    median   middle value; mean of the two middle values for even counts,
             rounded to 2 decimals
    min/max  unrounded extrema

``sample_count`` is the larger of the USD and ZWG list lengths, so a
material quoted only in ZWG still reports its samples. Empty lists yield
``None`` statistics.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from pricescraper.domain import PriceObservation, WeeklyAggregate


def week_start(scraped_at: datetime) -> date:
    """
    Monday of the UTC ISO week containing ``scraped_at``. Naive values are taken as UTC.
    """

    if scraped_at.tzinfo is None:
        moment = scraped_at.replace(tzinfo=timezone.utc)
    else:
        moment = scraped_at.astimezone(timezone.utc)
    day = moment.date()
    return day - timedelta(days=day.weekday())


def average(values: Sequence[float]) -> float | None:
    if not values:
        return None
    return round(sum(values) / len(values), 2)


def median(values: Sequence[float]) -> float | None:
    if not values:
        return None
    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return round((ordered[middle - 1] + ordered[middle]) / 2, 2)
    return round(ordered[middle], 2)


def minimum(values: Sequence[float]) -> float | None:
    return min(values) if values else None


def maximum(values: Sequence[float]) -> float | None:
    return max(values) if values else None


@dataclass
class _WeekBucket:
    material_key: str
    week_start: date
    last_scraped_at: datetime
    usd: list[float] = field(default_factory=list)
    zwg: list[float] = field(default_factory=list)

    def add(self, observation: PriceObservation, scraped_at: datetime) -> None:
        if observation.price_usd is not None:
            self.usd.append(observation.price_usd)
        if observation.price_zwg is not None:
            self.zwg.append(observation.price_zwg)
        if scraped_at > self.last_scraped_at:
            self.last_scraped_at = scraped_at

    def summarize(self) -> WeeklyAggregate:
        return WeeklyAggregate(
            material_key=self.material_key,
            week_start=self.week_start,
            avg_price_usd=average(self.usd),
            avg_price_zwg=average(self.zwg),
            median_price_usd=median(self.usd),
            median_price_zwg=median(self.zwg),
            min_price_usd=minimum(self.usd),
            max_price_usd=maximum(self.usd),
            min_price_zwg=minimum(self.zwg),
            max_price_zwg=maximum(self.zwg),
            sample_count=max(len(self.usd), len(self.zwg)),
            last_scraped_at=self.last_scraped_at,
        )


def aggregate_weekly(observations: Iterable[PriceObservation]) -> list[WeeklyAggregate]:
    """
    Aggregate observations by material and week, sorted by ``(material_key, week_start)``.
    """

    buckets: dict[tuple[str, date], _WeekBucket] = {}
    for observation in observations:
        scraped_at = observation.scraped_at
        if scraped_at.tzinfo is None:
            scraped_at = scraped_at.replace(tzinfo=timezone.utc)
        key = (observation.material_key, week_start(scraped_at))
        bucket = buckets.get(key)
        if bucket is None:
            bucket = _WeekBucket(
                material_key=key[0],
                week_start=key[1],
                last_scraped_at=scraped_at,
            )
            buckets[key] = bucket
        bucket.add(observation, scraped_at)

    return [buckets[key].summarize() for key in sorted(buckets)]
