"""
HTML table extractor.
"""

from __future__ import annotations

from pricescraper.domain import RawListing
from pricescraper.scraping.config.models import SourceConfig
from pricescraper.scraping.extractors.base import ListingExtractor
from pricescraper.scraping.parsing import DocumentQuery


class TableListingExtractor(ListingExtractor):
    """
    Reads name, unit and price columns from each table row.
    """

    DEFAULT_SELECTORS = {
        "row": "table tr",
        "name": "td:nth-child(1)",
        "unit": "td:nth-child(2)",
        "price": "td:nth-child(3)",
    }

    def extract(self, document: DocumentQuery, source: SourceConfig) -> list[RawListing]:
        listings: list[RawListing] = []
        for row in document.find_all(self.selector_for(source, "row")):
            name = self.field_text(row, self.selector_for(source, "name"))
            price = self.field_text(row, self.selector_for(source, "price"))
            if not name or not price:
                continue
            unit = self.field_text(row, self.selector_for(source, "unit"))
            listings.append(RawListing(name=name, price=price, unit=unit or None))
        return listings
