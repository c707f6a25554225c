"""
Domain models shared across the price pipeline.
"""

from pricescraper.domain.price_scraping import (
    Currency,
    PriceObservation,
    RawListing,
    RunReport,
    SourceError,
    SourceRunSummary,
    SourceStatus,
    UnmatchedListing,
    UnmatchedReason,
    WeeklyAggregate,
)

__all__ = [
    "Currency",
    "PriceObservation",
    "RawListing",
    "RunReport",
    "SourceError",
    "SourceRunSummary",
    "SourceStatus",
    "UnmatchedListing",
    "UnmatchedReason",
    "WeeklyAggregate",
]
