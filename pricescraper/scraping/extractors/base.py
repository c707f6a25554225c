"""
Listing extractor abstraction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pricescraper.domain import RawListing
from pricescraper.scraping.config.models import SourceConfig
from pricescraper.scraping.parsing import DocumentQuery


class ListingExtractor(ABC):
    """
    Turns a parsed page into raw listings for one source.
    """

    DEFAULT_SELECTORS: dict[str, str] = {}

    @abstractmethod
    def extract(self, document: DocumentQuery, source: SourceConfig) -> list[RawListing]:
        """
        Return raw listings found in ``document``.
        """

    def selector_for(self, source: SourceConfig, field_name: str) -> str:
        return source.selectors.get(field_name) or self.DEFAULT_SELECTORS[field_name]

    @staticmethod
    def field_text(node: DocumentQuery, selector: str) -> str:
        parts = [match.text() for match in node.find_all(selector)]
        return " ".join(part for part in parts if part).strip()

    @staticmethod
    def field_attr(node: DocumentQuery, selector: str, name: str) -> str | None:
        for match in node.find_all(selector):
            value = match.attr(name)
            if value:
                return value
        return None
