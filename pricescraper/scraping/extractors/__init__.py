"""
Listing extractor exports.
"""

from pricescraper.scraping.extractors.base import ListingExtractor
from pricescraper.scraping.extractors.card import CardListingExtractor
from pricescraper.scraping.extractors.table import TableListingExtractor
from pricescraper.scraping.extractors.text_list import TextListExtractor

__all__ = [
    "CardListingExtractor",
    "ListingExtractor",
    "TableListingExtractor",
    "TextListExtractor",
]
