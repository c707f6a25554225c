"""
Storage layer interface for price pipeline outputs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from pricescraper.domain import PriceObservation, UnmatchedListing, WeeklyAggregate


class PriceStorage(ABC):
    """
    Persistence collaborator for one run's batches.

    Implementations must make retries of the same batch safe: observation and
    unmatched inserts must not duplicate rows, and weekly rows are upserted on
    ``(material_key, week_start)``.
    """

    @abstractmethod
    def insert_observations(self, rows: Sequence[PriceObservation]) -> int:
        """
        Append observations and return the number of rows stored.
        """

    @abstractmethod
    def insert_unmatched(self, rows: Sequence[UnmatchedListing]) -> int:
        """
        Append diagnostic rows for listings that produced no observation.
        """

    @abstractmethod
    def upsert_weekly(self, rows: Sequence[WeeklyAggregate]) -> int:
        """
        Insert or overwrite weekly aggregates.
        """
