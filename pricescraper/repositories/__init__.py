"""
Repository exports.
"""

from pricescraper.repositories.price_repository import PriceRepository

__all__ = ["PriceRepository"]
