"""
pricescraper/repositories/price_repository.py

Persistence layer for price observations, unmatched listings and weekly
aggregates.

All methods are transaction-safe. The caller controls commit/rollback;
this repository never commits on its own.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from db.models.exchange_rate import ExchangeRate
from db.models.price_observation import DEDUPE_CONSTRAINT as OBSERVATION_DEDUPE_CONSTRAINT
from db.models.price_observation import PriceObservationRecord
from db.models.price_weekly import UPSERT_CONSTRAINT as WEEKLY_UPSERT_CONSTRAINT
from db.models.price_weekly import PriceWeeklyRecord
from db.models.unmatched_listing import DEDUPE_CONSTRAINT as UNMATCHED_DEDUPE_CONSTRAINT
from db.models.unmatched_listing import UnmatchedListingRecord
from pricescraper.domain import PriceObservation, UnmatchedListing, WeeklyAggregate

_DEFAULT_BATCH_SIZE = 500
_WEEKLY_VALUE_COLUMNS = (
    "avg_price_usd",
    "avg_price_zwg",
    "median_price_usd",
    "median_price_zwg",
    "min_price_usd",
    "max_price_usd",
    "min_price_zwg",
    "max_price_zwg",
    "sample_count",
    "last_scraped_at",
)


class PriceRepository:
    """
    Repository for batch writes of price pipeline outputs.

    Observations and unmatched listings are append-only; a dedupe constraint
    turns re-delivered rows into no-ops. Weekly aggregates are upserted on
    ``(material_key, week_start)``, so the latest aggregation wins.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def insert_observations(
        self,
        rows: Sequence[PriceObservation],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> int:
        """
        Insert observations, skipping rows already stored. Returns the inserted count.
        """

        payloads = [asdict(row) for row in rows]
        inserted = 0
        for chunk in _chunks(payloads, batch_size):
            stmt = (
                insert(PriceObservationRecord)
                .values(chunk)
                .on_conflict_do_nothing(constraint=OBSERVATION_DEDUPE_CONSTRAINT)
                .returning(PriceObservationRecord.id)
            )
            inserted += len(self._session.scalars(stmt).all())
        return inserted

    def insert_unmatched(
        self,
        rows: Sequence[UnmatchedListing],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> int:
        payloads = [
            {
                "source_name": row.source,
                "scraped_name": row.name,
                "raw_price": row.raw_price,
                "reason": row.reason,
                "url": row.url,
                "scraped_at": row.scraped_at,
            }
            for row in rows
        ]
        inserted = 0
        for chunk in _chunks(payloads, batch_size):
            stmt = (
                insert(UnmatchedListingRecord)
                .values(chunk)
                .on_conflict_do_nothing(constraint=UNMATCHED_DEDUPE_CONSTRAINT)
                .returning(UnmatchedListingRecord.id)
            )
            inserted += len(self._session.scalars(stmt).all())
        return inserted

    def upsert_weekly(
        self,
        rows: Sequence[WeeklyAggregate],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> int:
        """
        Upsert weekly aggregates keyed by ``(material_key, week_start)``.

        Duplicate keys within one call are collapsed before hitting the
        database; the last occurrence wins. Returns rows written.
        """

        deduped: dict[tuple[str, Any], dict[str, Any]] = {}
        for row in rows:
            deduped[(row.material_key, row.week_start)] = asdict(row)

        written = 0
        for chunk in _chunks(list(deduped.values()), batch_size):
            stmt = insert(PriceWeeklyRecord).values(chunk)
            stmt = stmt.on_conflict_do_update(
                constraint=WEEKLY_UPSERT_CONSTRAINT,
                set_={
                    **{column: stmt.excluded[column] for column in _WEEKLY_VALUE_COLUMNS},
                    "updated_at": _now_utc(),
                },
            )
            self._session.execute(stmt)
            written += len(chunk)
        return written

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def latest_exchange_rate(self) -> float | None:
        stmt = select(ExchangeRate.usd_to_zwg).order_by(ExchangeRate.date.desc()).limit(1)
        value = self._session.scalars(stmt).first()
        if value is None:
            return None
        rate = float(value)
        return rate if rate > 0 else None


def _chunks(payloads: Sequence[dict[str, Any]], batch_size: int) -> list[list[dict[str, Any]]]:
    size = max(1, batch_size)
    return [list(payloads[start : start + size]) for start in range(0, len(payloads), size)]


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)
