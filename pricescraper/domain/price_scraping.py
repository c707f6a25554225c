"""
pricescraper/domain/price_scraping.py

Value types produced and consumed by one price scraping run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


class Currency:
    USD = "USD"
    ZWG = "ZWG"


class UnmatchedReason:
    UNMATCHED_MATERIAL = "unmatched_material"
    UNPARSEABLE_PRICE = "unparseable_price"
    UNKNOWN_CURRENCY = "unknown_currency"


class SourceStatus:
    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class RawListing:
    """
    One listing as read from a page, before any parsing or matching.
    """

    name: str
    price: str
    unit: str | None = None
    location: str | None = None
    supplier: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class PriceObservation:
    """
    A single price data point extracted from one source at one point in time.
    """

    source_id: str | None
    source_name: str
    material_key: str
    material_name: str
    unit: str | None
    price_original: float
    currency: str | None
    price_usd: float | None
    price_zwg: float | None
    location: str | None
    supplier_name: str | None
    url: str | None
    confidence: int
    scraped_at: datetime


@dataclass(frozen=True)
class UnmatchedListing:
    """
    Diagnostic record for a listing that did not become an observation.
    """

    source: str
    name: str
    raw_price: str
    reason: str
    scraped_at: datetime
    url: str | None = None


@dataclass(frozen=True)
class WeeklyAggregate:
    """
    Statistics for one material within one ISO week.
    """

    material_key: str
    week_start: date
    avg_price_usd: float | None
    avg_price_zwg: float | None
    median_price_usd: float | None
    median_price_zwg: float | None
    min_price_usd: float | None
    max_price_usd: float | None
    min_price_zwg: float | None
    max_price_zwg: float | None
    sample_count: int
    last_scraped_at: datetime


@dataclass(frozen=True)
class SourceError:
    """
    Soft failure recorded for one source; never aborts the run.
    """

    source: str
    stage: str
    message: str
    status_code: int | None = None


@dataclass(frozen=True)
class SourceRunSummary:
    source: str
    status: str
    listings_found: int = 0
    observations_built: int = 0
    unmatched_count: int = 0
    error: str | None = None


@dataclass
class RunReport:
    """
    Everything one run produced, including partial results after cancellation.
    """

    observations: list[PriceObservation] = field(default_factory=list)
    unmatched: list[UnmatchedListing] = field(default_factory=list)
    weekly: list[WeeklyAggregate] = field(default_factory=list)
    sources: list[SourceRunSummary] = field(default_factory=list)
    source_errors: list[SourceError] = field(default_factory=list)
    exchange_rate: float | None = None
    cancelled: bool = False
    persisted: bool = False

    @property
    def failed_sources(self) -> int:
        return sum(1 for summary in self.sources if summary.status == SourceStatus.FAILED)
