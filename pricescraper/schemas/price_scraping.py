"""
pricescraper/schemas/price_scraping.py

Response schemas for price scraping runs.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from pricescraper.domain import RunReport


class SourceRunSummaryResponse(BaseModel):
    source: str
    status: str
    listings_found: int = Field(..., ge=0)
    observations_built: int = Field(..., ge=0)
    unmatched_count: int = Field(..., ge=0)
    error: str | None = None


class SourceErrorResponse(BaseModel):
    source: str
    stage: str
    message: str
    status_code: int | None = None


class PriceScrapeRunResponse(BaseModel):
    """
    API response model for one price scraping run.
    """

    observations: int = Field(..., ge=0)
    unmatched: int = Field(..., ge=0)
    weekly_aggregates: int = Field(..., ge=0)
    exchange_rate: float | None = None
    cancelled: bool = False
    persisted: bool = False
    sources: list[SourceRunSummaryResponse] = Field(default_factory=list)
    source_errors: list[SourceErrorResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: RunReport) -> "PriceScrapeRunResponse":
        return cls(
            observations=len(report.observations),
            unmatched=len(report.unmatched),
            weekly_aggregates=len(report.weekly),
            exchange_rate=report.exchange_rate,
            cancelled=report.cancelled,
            persisted=report.persisted,
            sources=[
                SourceRunSummaryResponse(
                    source=summary.source,
                    status=summary.status,
                    listings_found=summary.listings_found,
                    observations_built=summary.observations_built,
                    unmatched_count=summary.unmatched_count,
                    error=summary.error,
                )
                for summary in report.sources
            ],
            source_errors=[
                SourceErrorResponse(
                    source=error.source,
                    stage=error.stage,
                    message=error.message,
                    status_code=error.status_code,
                )
                for error in report.source_errors
            ],
        )
