"""
Storage layer exports.
"""

from pricescraper.scraping.storage.base import PriceStorage
from pricescraper.scraping.storage.json_storage import JsonFilePriceStorage
from pricescraper.scraping.storage.sqlalchemy_storage import SQLAlchemyPriceStorage

__all__ = ["JsonFilePriceStorage", "PriceStorage", "SQLAlchemyPriceStorage"]
