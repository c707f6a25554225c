"""
Model package exports.

Import every price model here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.exchange_rate import ExchangeRate
from db.models.price_observation import PriceObservationRecord
from db.models.price_weekly import PriceWeeklyRecord
from db.models.unmatched_listing import UnmatchedListingRecord

__all__ = [
    "ExchangeRate",
    "PriceObservationRecord",
    "PriceWeeklyRecord",
    "UnmatchedListingRecord",
]
