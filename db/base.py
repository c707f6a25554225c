"""
db/base.py

Declarative base for the price tables.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Declarative base shared by every price model.
    """

    type_annotation_map: dict[type, Any] = {}


class UpdatedAtMixin:
    """
    Adds an `updated_at` column refreshed on every UPDATE, used by upserted tables.
    """

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=lambda: datetime.now(timezone.utc),
    )
