"""
Config helpers for price scraping.
"""

from pricescraper.scraping.config.loader import (
    get_price_scraping_settings,
    load_alias_mapping,
    load_source_configs,
    parse_source_configs,
)
from pricescraper.scraping.config.models import PriceScrapingSettings, SourceConfig

__all__ = [
    "PriceScrapingSettings",
    "SourceConfig",
    "get_price_scraping_settings",
    "load_alias_mapping",
    "load_source_configs",
    "parse_source_configs",
]
