"""
Exceptions raised by the price scraping pipeline.

Per-source network and parsing problems are reported as values on the run
report; only the failures listed here propagate.
"""

from __future__ import annotations


class PriceScrapingError(Exception):
    """Base exception for price pipeline failures."""


class PersistenceError(PriceScrapingError):
    """Raised when a batch could not be handed to storage."""

    def __init__(self, message: str, *, batch: str, row_count: int) -> None:
        super().__init__(message)
        self.batch = batch
        self.row_count = row_count
