"""
API schema exports.
"""

from pricescraper.schemas.price_scraping import (
    PriceScrapeRunResponse,
    SourceErrorResponse,
    SourceRunSummaryResponse,
)

__all__ = ["PriceScrapeRunResponse", "SourceErrorResponse", "SourceRunSummaryResponse"]
