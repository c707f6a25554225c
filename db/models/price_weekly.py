"""
db/models/price_weekly.py

Weekly market summary per material.
One row per material per ISO week.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Integer, Numeric, PrimaryKeyConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, UpdatedAtMixin

UPSERT_CONSTRAINT = "pk_price_weekly"


class PriceWeeklyRecord(UpdatedAtMixin, Base):
    """
    Weekly statistics for one material.

    The primary key ``(material_key, week_start)`` drives upsert semantics:
    re-aggregating a week overwrites the stored row.
    """

    __tablename__ = "price_weekly"

    material_key: Mapped[str] = mapped_column(String(160), nullable=False)
    week_start: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Monday of the ISO week (UTC)",
    )
    avg_price_usd: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False))
    avg_price_zwg: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False))
    median_price_usd: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False))
    median_price_zwg: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False))
    min_price_usd: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False))
    max_price_usd: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False))
    min_price_zwg: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False))
    max_price_zwg: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False))
    sample_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_scraped_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        PrimaryKeyConstraint("material_key", "week_start", name=UPSERT_CONSTRAINT),
    )
