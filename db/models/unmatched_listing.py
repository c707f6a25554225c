"""
db/models/unmatched_listing.py

Scraped listings that could not become observations, kept for alias curation.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base

DEDUPE_CONSTRAINT = "uq_unmatched_listings_dedupe"


class UnmatchedListingRecord(Base):
    __tablename__ = "unmatched_listings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    source_name: Mapped[str] = mapped_column(String(255), nullable=False)
    scraped_name: Mapped[str] = mapped_column(Text, nullable=False)
    raw_price: Mapped[str] = mapped_column(Text, nullable=False)
    reason: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="unmatched_material, unparseable_price, unknown_currency",
    )
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    scraped_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(
            "source_name",
            "scraped_name",
            "raw_price",
            "url",
            "scraped_at",
            name=DEDUPE_CONSTRAINT,
            postgresql_nulls_not_distinct=True,
        ),
        Index("ix_unmatched_listings_reason", "reason"),
    )
