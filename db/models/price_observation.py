"""
db/models/price_observation.py

One scraped price data point. Append-only.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, Numeric, SmallInteger, String, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base

DEDUPE_CONSTRAINT = "uq_price_observations_dedupe"


class PriceObservationRecord(Base):
    """
    Persisted price observation.

    The dedupe constraint covers every descriptive column, with NULLs
    compared as equal, so re-delivering a batch is a no-op while two sellers
    quoting the same price for the same product stay separate rows.
    """

    __tablename__ = "price_observations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    source_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    source_name: Mapped[str] = mapped_column(String(255), nullable=False)
    material_key: Mapped[str] = mapped_column(String(160), nullable=False)
    material_name: Mapped[str] = mapped_column(Text, nullable=False)
    unit: Mapped[str | None] = mapped_column(String(80), nullable=True)
    price_original: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
        comment="USD or ZWG",
    )
    price_usd: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    price_zwg: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    supplier_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    confidence: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        default=2,
        comment="Source trust level, 1 (low) to 5 (high)",
    )
    scraped_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "source_name",
            "material_key",
            "material_name",
            "price_original",
            "currency",
            "location",
            "supplier_name",
            "url",
            "scraped_at",
            name=DEDUPE_CONSTRAINT,
            postgresql_nulls_not_distinct=True,
        ),
        Index("ix_price_observations_material_key", "material_key"),
        Index("ix_price_observations_scraped_at", "scraped_at"),
    )
