"""
pricescraper/services/price_scraping_service.py

Service orchestration for building-material price scraping.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pricescraper.domain import RunReport
from pricescraper.matching import AliasDictionary
from pricescraper.repositories import PriceRepository
from pricescraper.scraping.config import (
    PriceScrapingSettings,
    get_price_scraping_settings,
    load_alias_mapping,
    load_source_configs,
)
from pricescraper.scraping.engine import PriceScrapingEngine
from pricescraper.scraping.logging_utils import log_event
from pricescraper.scraping.storage import JsonFilePriceStorage, PriceStorage, SQLAlchemyPriceStorage

logger = logging.getLogger(__name__)


class PriceScrapingService:
    """
    Loads sources, aliases and the exchange rate, runs the engine and picks storage.

    Dry runs write JSON files to the output directory instead of the database.
    """

    def __init__(self, settings: PriceScrapingSettings | None = None) -> None:
        self._settings = settings or get_price_scraping_settings()

    @property
    def settings(self) -> PriceScrapingSettings:
        return self._settings

    def ingest(
        self,
        *,
        db: Session | None,
        source: str | None = None,
        dry_run: bool | None = None,
        exchange_rate: float | None = None,
        output_dir: str | Path | None = None,
    ) -> RunReport:
        sources = load_source_configs(config_path=self._settings.sources_path)
        aliases = AliasDictionary(load_alias_mapping(aliases_path=self._settings.aliases_path))
        if not sources:
            raise ValueError("No price sources configured.")

        is_dry_run = self._settings.dry_run if dry_run is None else dry_run
        storage = self._storage_for(
            db=db,
            dry_run=is_dry_run,
            output_dir=output_dir or self._settings.output_dir,
        )
        rate = self.resolve_exchange_rate(db=db, explicit=exchange_rate)

        engine = PriceScrapingEngine(settings=self._settings, storage=storage)
        return engine.run(
            sources,
            aliases,
            rate,
            source_names=[source] if source else None,
            dry_run=False,
        )

    def resolve_exchange_rate(
        self,
        *,
        db: Session | None,
        explicit: float | None = None,
    ) -> float | None:
        """
        Explicit rate, then the PRICE_EXCHANGE_RATE override, then the latest stored rate.
        """

        for candidate in (explicit, self._settings.exchange_rate_override):
            if candidate is not None and candidate > 0:
                return candidate
        if db is None:
            return None

        try:
            return PriceRepository(db).latest_exchange_rate()
        except SQLAlchemyError as exc:
            log_event(
                logger,
                logging.WARNING,
                "exchange_rate_lookup_failed",
                error=str(exc),
            )
            return None

    def _storage_for(
        self,
        *,
        db: Session | None,
        dry_run: bool,
        output_dir: str | Path,
    ) -> PriceStorage:
        if dry_run:
            return JsonFilePriceStorage(output_dir=output_dir)
        if db is None:
            raise ValueError("A database session is required unless running with dry_run.")
        return SQLAlchemyPriceStorage(session=db, batch_size=self._settings.storage_batch_size)


@lru_cache(maxsize=1)
def get_price_scraping_service() -> PriceScrapingService:
    """
    Build and cache the price scraping service.
    """

    return PriceScrapingService()
