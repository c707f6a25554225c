"""
Service layer exports.
"""

from pricescraper.services.price_scraping_service import (
    PriceScrapingService,
    get_price_scraping_service,
)

__all__ = ["PriceScrapingService", "get_price_scraping_service"]
