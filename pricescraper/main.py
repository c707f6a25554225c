"""
FastAPI application exposing price scraping runs.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from pricescraper.api.routers import price_scraping_router

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

app = FastAPI(title="Material Price Scraper")
app.include_router(price_scraping_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
