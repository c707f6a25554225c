"""
Product-card extractor.
"""

from __future__ import annotations

from pricescraper.domain import RawListing
from pricescraper.scraping.config.models import SourceConfig
from pricescraper.scraping.extractors.base import ListingExtractor
from pricescraper.scraping.parsing import DocumentQuery


class CardListingExtractor(ListingExtractor):
    """
    Reads one listing per item node matched by the ``item`` selector.
    """

    DEFAULT_SELECTORS = {
        "item": ".listing",
        "name": ".title",
        "price": ".price",
        "unit": ".unit",
        "location": ".location",
        "supplier": ".seller",
        "url": "a",
    }

    def extract(self, document: DocumentQuery, source: SourceConfig) -> list[RawListing]:
        listings: list[RawListing] = []
        for item in document.find_all(self.selector_for(source, "item")):
            name = self.field_text(item, self.selector_for(source, "name"))
            price = self.field_text(item, self.selector_for(source, "price"))
            if not name or not price:
                continue
            listings.append(
                RawListing(
                    name=name,
                    price=price,
                    unit=self.field_text(item, self.selector_for(source, "unit")) or None,
                    location=self.field_text(item, self.selector_for(source, "location")) or None,
                    supplier=self.field_text(item, self.selector_for(source, "supplier")) or None,
                    url=self.field_attr(item, self.selector_for(source, "url"), "href"),
                )
            )
        return listings
