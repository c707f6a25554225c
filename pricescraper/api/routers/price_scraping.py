"""
pricescraper/api/routers/price_scraping.py

Price scraping ingestion endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from db.session import get_optional_db
from pricescraper.schemas.price_scraping import PriceScrapeRunResponse
from pricescraper.scraping.errors import PersistenceError
from pricescraper.services.price_scraping_service import (
    PriceScrapingService,
    get_price_scraping_service,
)

router = APIRouter(tags=["price-scraping"])


@router.post("/ingest-prices", response_model=PriceScrapeRunResponse)
def ingest_prices(
    source: str | None = Query(default=None, description="Optional source name or id filter"),
    dry_run: bool = Query(default=False, description="Write JSON output instead of the database"),
    db: Session | None = Depends(get_optional_db),
    scraping_service: PriceScrapingService = Depends(get_price_scraping_service),
) -> PriceScrapeRunResponse:
    """
    Run price scraping for all active sources or one selected source.
    """

    try:
        report = scraping_service.ingest(db=db, source=source, dry_run=dry_run)
    except (ValueError, FileNotFoundError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc

    return PriceScrapeRunResponse.from_report(report)
