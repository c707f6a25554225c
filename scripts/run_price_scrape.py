"""
Run building-material price scraping from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
from contextlib import nullcontext

from db.session import SessionLocal
from pricescraper.services.price_scraping_service import PriceScrapingService


def main() -> int:
    parser = argparse.ArgumentParser(description="Run building-material price scraping.")
    parser.add_argument(
        "--source",
        dest="source",
        default=None,
        help="Optional source name or id from the sources file.",
    )
    parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=None,
        help="Write observations/unmatched/weekly JSON files instead of the database.",
    )
    parser.add_argument(
        "--output-dir",
        dest="output_dir",
        default=None,
        help="Directory for dry-run JSON output.",
    )
    parser.add_argument(
        "--exchange-rate",
        dest="exchange_rate",
        type=float,
        default=None,
        help="USD to ZWG rate to use instead of the stored one.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    service = PriceScrapingService()
    dry_run = service.settings.dry_run if args.dry_run is None else args.dry_run
    session_scope = nullcontext(None) if dry_run else SessionLocal()
    with session_scope as db:
        report = service.ingest(
            db=db,
            source=args.source,
            dry_run=dry_run,
            exchange_rate=args.exchange_rate,
            output_dir=args.output_dir,
        )

    payload = {
        "observations": len(report.observations),
        "unmatched": len(report.unmatched),
        "weekly_aggregates": len(report.weekly),
        "exchange_rate": report.exchange_rate,
        "cancelled": report.cancelled,
        "persisted": report.persisted,
        "sources": [
            {
                "source": summary.source,
                "status": summary.status,
                "listings_found": summary.listings_found,
                "observations_built": summary.observations_built,
                "unmatched_count": summary.unmatched_count,
                "error": summary.error,
            }
            for summary in report.sources
        ],
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
