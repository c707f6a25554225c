"""
Price scraping engine.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone

import requests

from pricescraper.domain import (
    PriceObservation,
    RunReport,
    SourceError,
    SourceRunSummary,
    SourceStatus,
    UnmatchedListing,
)
from pricescraper.matching import AliasDictionary, MaterialMatcher
from pricescraper.scraping.aggregation import aggregate_weekly
from pricescraper.scraping.config.models import PriceScrapingSettings, SourceConfig
from pricescraper.scraping.errors import PersistenceError
from pricescraper.scraping.fetcher import PageFetcher
from pricescraper.scraping.logging_utils import log_event
from pricescraper.scraping.normalization import ObservationBuilder
from pricescraper.scraping.parsing import SoupDocument
from pricescraper.scraping.registry import ExtractorRegistry
from pricescraper.scraping.storage import PriceStorage

logger = logging.getLogger(__name__)


@dataclass
class _SourceResult:
    """
    Collector owned by a single source worker; merged after all workers finish.
    """

    summary: SourceRunSummary
    observations: list[PriceObservation] = field(default_factory=list)
    unmatched: list[UnmatchedListing] = field(default_factory=list)
    error: SourceError | None = None


class _CancelToken:
    def __init__(self, event: threading.Event | None, deadline: float | None) -> None:
        self._event = event or threading.Event()
        self._deadline = deadline

    def is_set(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def wait(self, seconds: float) -> None:
        if seconds <= 0:
            return
        if self._deadline is not None:
            seconds = min(seconds, max(0.0, self._deadline - time.monotonic()))
        self._event.wait(seconds)


class PriceScrapingEngine:
    """
    Orchestrates fetch, extraction, matching, observation building,
    weekly aggregation and persistence for a list of price sources.

    A failing source is recorded on the run report and never stops the
    other sources. ``max_workers`` above 1 processes sources concurrently;
    results are merged in configured source order either way.
    """

    def __init__(
        self,
        *,
        settings: PriceScrapingSettings,
        storage: PriceStorage | None = None,
        registry: ExtractorRegistry | None = None,
        session: requests.Session | None = None,
        fetcher: PageFetcher | None = None,
        builder: ObservationBuilder | None = None,
    ) -> None:
        self._settings = settings
        self._storage = storage
        self._registry = registry or ExtractorRegistry()
        self._fetcher = fetcher or PageFetcher(settings=settings, session=session)
        self._builder = builder or ObservationBuilder()

    def run(
        self,
        sources: Sequence[SourceConfig],
        aliases: AliasDictionary | Mapping[str, str],
        exchange_rate: float | None = None,
        *,
        source_names: Sequence[str] | None = None,
        cancel_event: threading.Event | None = None,
        deadline: float | None = None,
        dry_run: bool | None = None,
        scraped_at: datetime | None = None,
    ) -> RunReport:
        """
        Run the pipeline once and return everything it produced.

        ``deadline`` is a ``time.monotonic()`` value. Once it passes, or
        ``cancel_event`` is set, no new source is fetched; what was built so
        far is still aggregated and persisted.
        """

        selected = self.select_sources(sources, source_names)
        matcher = MaterialMatcher(aliases)
        run_at = scraped_at or datetime.now(timezone.utc)
        token = _CancelToken(cancel_event, deadline)
        rate = exchange_rate if exchange_rate and exchange_rate > 0 else None

        log_event(
            logger,
            logging.INFO,
            "price_scrape_started",
            sources=len(selected),
            aliases=len(matcher.aliases),
            exchange_rate=rate,
            max_workers=self._settings.max_workers,
        )

        results = self._process_all(selected, matcher, rate, run_at, token)

        skipped = any(result.summary.status == SourceStatus.SKIPPED for result in results)
        report = RunReport(exchange_rate=rate, cancelled=skipped or token.is_set())
        for result in results:
            report.sources.append(result.summary)
            report.observations.extend(result.observations)
            report.unmatched.extend(result.unmatched)
            if result.error is not None:
                report.source_errors.append(result.error)
        report.weekly = aggregate_weekly(report.observations)

        skip_persistence = self._settings.dry_run if dry_run is None else dry_run
        if self._storage is not None and not skip_persistence:
            self._persist(report, self._storage)
            report.persisted = True

        log_event(
            logger,
            logging.INFO,
            "price_scrape_completed",
            observations=len(report.observations),
            unmatched=len(report.unmatched),
            weekly=len(report.weekly),
            failed_sources=report.failed_sources,
            cancelled=report.cancelled,
            persisted=report.persisted,
        )
        return report

    @staticmethod
    def select_sources(
        sources: Sequence[SourceConfig],
        source_names: Sequence[str] | None = None,
    ) -> list[SourceConfig]:
        active = [source for source in sources if source.is_active and source.url]
        if not source_names:
            return active

        wanted = {name.strip().lower() for name in source_names if name.strip()}
        if not wanted:
            return active
        return [
            source
            for source in active
            if source.name.lower() in wanted or source.source_id.lower() in wanted
        ]

    def _process_all(
        self,
        sources: list[SourceConfig],
        matcher: MaterialMatcher,
        exchange_rate: float | None,
        scraped_at: datetime,
        token: _CancelToken,
    ) -> list[_SourceResult]:
        delays = [self._settings.source_delay_seconds] * len(sources)
        if delays:
            delays[-1] = 0.0

        if self._settings.max_workers <= 1 or len(sources) <= 1:
            return [
                self._process_source(source, matcher, exchange_rate, scraped_at, token, delay)
                for source, delay in zip(sources, delays)
            ]

        with ThreadPoolExecutor(max_workers=self._settings.max_workers) as executor:
            futures = [
                executor.submit(
                    self._process_source,
                    source,
                    matcher,
                    exchange_rate,
                    scraped_at,
                    token,
                    delay,
                )
                for source, delay in zip(sources, delays)
            ]
            return [future.result() for future in futures]

    def _process_source(
        self,
        source: SourceConfig,
        matcher: MaterialMatcher,
        exchange_rate: float | None,
        scraped_at: datetime,
        token: _CancelToken,
        delay: float = 0.0,
    ) -> _SourceResult:
        name = source.display_name
        if token.is_set():
            return _SourceResult(summary=SourceRunSummary(source=name, status=SourceStatus.SKIPPED))

        try:
            return self._scrape_source(source, matcher, exchange_rate, scraped_at)
        except Exception as exc:
            return self._failed(name, SourceError(source=name, stage="process", message=str(exc)))
        finally:
            token.wait(delay)

    def _scrape_source(
        self,
        source: SourceConfig,
        matcher: MaterialMatcher,
        exchange_rate: float | None,
        scraped_at: datetime,
    ) -> _SourceResult:
        name = source.display_name
        log_event(logger, logging.INFO, "source_fetch_started", source=name, url=source.url)

        fetched = self._fetcher.fetch(source.url, source.headers)
        if not fetched.ok:
            return self._failed(
                name,
                SourceError(
                    source=name,
                    stage="fetch",
                    message=fetched.error or "fetch failed",
                    status_code=fetched.status_code,
                ),
            )

        try:
            extractor = self._registry.create(source)
            listings = extractor.extract(SoupDocument.from_html(fetched.document or ""), source)
        except Exception as exc:
            return self._failed(name, SourceError(source=name, stage="extract", message=str(exc)))

        result = _SourceResult(summary=SourceRunSummary(source=name, status=SourceStatus.SUCCESS))
        for listing in listings:
            material_key = matcher.match(listing.name)
            observation = self._builder.build(
                source=source,
                listing=listing,
                material_key=material_key,
                exchange_rate=exchange_rate,
                scraped_at=scraped_at,
            )
            if observation is not None:
                result.observations.append(observation)
                continue
            result.unmatched.append(
                UnmatchedListing(
                    source=name,
                    name=listing.name,
                    raw_price=listing.price,
                    reason=self._builder.rejection_reason(
                        source=source,
                        listing=listing,
                        material_key=material_key,
                    ),
                    scraped_at=scraped_at,
                    url=listing.url,
                )
            )

        result.summary = SourceRunSummary(
            source=name,
            status=SourceStatus.SUCCESS if listings else SourceStatus.EMPTY,
            listings_found=len(listings),
            observations_built=len(result.observations),
            unmatched_count=len(result.unmatched),
        )
        log_event(
            logger,
            logging.INFO,
            "source_scraped",
            source=name,
            final_url=fetched.final_url,
            listings=len(listings),
            observations=len(result.observations),
            unmatched=len(result.unmatched),
        )
        return result

    @staticmethod
    def _failed(name: str, error: SourceError) -> _SourceResult:
        log_event(
            logger,
            logging.WARNING,
            "source_scrape_failed",
            source=name,
            stage=error.stage,
            status_code=error.status_code,
            error=error.message,
        )
        return _SourceResult(
            summary=SourceRunSummary(source=name, status=SourceStatus.FAILED, error=error.message),
            error=error,
        )

    @staticmethod
    def _persist(report: RunReport, storage: PriceStorage) -> None:
        batches = (
            ("observations", report.observations, storage.insert_observations),
            ("unmatched", report.unmatched, storage.insert_unmatched),
            ("weekly", report.weekly, storage.upsert_weekly),
        )
        for batch, rows, writer in batches:
            try:
                written = writer(rows)
            except Exception as exc:
                log_event(
                    logger,
                    logging.ERROR,
                    "persistence_failed",
                    batch=batch,
                    row_count=len(rows),
                    context=_batch_context(batch, report),
                    error=str(exc),
                )
                raise PersistenceError(
                    f"Failed to persist {batch} batch ({len(rows)} rows): {exc}",
                    batch=batch,
                    row_count=len(rows),
                ) from exc
            log_event(
                logger,
                logging.INFO,
                "batch_persisted",
                batch=batch,
                rows=len(rows),
                written=written,
            )
            if batch != "weekly" and written < len(rows):
                log_event(
                    logger,
                    logging.WARNING,
                    "batch_rows_already_stored",
                    batch=batch,
                    rows=len(rows),
                    skipped=len(rows) - written,
                )


def _batch_context(batch: str, report: RunReport) -> dict[str, object]:
    if batch == "weekly":
        weeks = sorted({row.week_start for row in report.weekly})
        return {
            "material_keys": sorted({row.material_key for row in report.weekly}),
            "week_range": [weeks[0], weeks[-1]] if weeks else [],
        }
    if batch == "observations":
        return {
            "material_keys": sorted({row.material_key for row in report.observations}),
            "sources": sorted({row.source_name for row in report.observations}),
        }
    return {"sources": sorted({row.source for row in report.unmatched})}
