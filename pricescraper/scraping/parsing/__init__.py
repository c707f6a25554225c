"""
Document access and price text parsing.
"""

from pricescraper.scraping.parsing.document import DocumentQuery, SoupDocument
from pricescraper.scraping.parsing.price_parser import ParsedPrice, parse_price

__all__ = ["DocumentQuery", "ParsedPrice", "SoupDocument", "parse_price"]
