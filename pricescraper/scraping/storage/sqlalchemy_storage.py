"""
SQLAlchemy-backed storage for price pipeline outputs.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pricescraper.domain import PriceObservation, UnmatchedListing, WeeklyAggregate
from pricescraper.repositories.price_repository import PriceRepository
from pricescraper.scraping.storage.base import PriceStorage

RowT = TypeVar("RowT")


class SQLAlchemyPriceStorage(PriceStorage):
    """
    Persist batches through ``PriceRepository``, committing once per batch kind.
    """

    def __init__(self, *, session: Session, batch_size: int = 500) -> None:
        self._session = session
        self._batch_size = max(1, batch_size)
        self._repository = PriceRepository(session)

    def insert_observations(self, rows: Sequence[PriceObservation]) -> int:
        return self._write(rows, self._repository.insert_observations)

    def insert_unmatched(self, rows: Sequence[UnmatchedListing]) -> int:
        return self._write(rows, self._repository.insert_unmatched)

    def upsert_weekly(self, rows: Sequence[WeeklyAggregate]) -> int:
        return self._write(rows, self._repository.upsert_weekly)

    def _write(
        self,
        rows: Sequence[RowT],
        writer: Callable[..., int],
    ) -> int:
        if not rows:
            return 0

        try:
            written = writer(rows, batch_size=self._batch_size)
            self._session.commit()
            return written
        except SQLAlchemyError:
            self._session.rollback()
            raise
