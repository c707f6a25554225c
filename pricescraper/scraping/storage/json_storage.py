"""
JSON file storage for dry runs and offline review.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import asdict
from pathlib import Path
from typing import Any

from pricescraper.domain import PriceObservation, UnmatchedListing, WeeklyAggregate
from pricescraper.scraping.storage.base import PriceStorage

OBSERVATIONS_FILE = "observations.json"
UNMATCHED_FILE = "unmatched.json"
WEEKLY_FILE = "weekly.json"


class JsonFilePriceStorage(PriceStorage):
    """
    Write each batch kind to its own JSON file under ``output_dir``.

    Observation and unmatched files hold the latest run. The weekly file is
    merged by ``(material_key, week_start)`` so re-runs replace earlier rows.
    """

    def __init__(self, *, output_dir: str | Path) -> None:
        self._output_dir = Path(output_dir)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def insert_observations(self, rows: Sequence[PriceObservation]) -> int:
        self._write(OBSERVATIONS_FILE, [asdict(row) for row in rows])
        return len(rows)

    def insert_unmatched(self, rows: Sequence[UnmatchedListing]) -> int:
        self._write(UNMATCHED_FILE, [asdict(row) for row in rows])
        return len(rows)

    def upsert_weekly(self, rows: Sequence[WeeklyAggregate]) -> int:
        merged: dict[tuple[str, str], dict[str, Any]] = {
            (item["material_key"], item["week_start"]): item
            for item in self._read(WEEKLY_FILE)
            if isinstance(item, dict) and "material_key" in item and "week_start" in item
        }
        for row in rows:
            payload = json.loads(json.dumps(asdict(row), default=_json_default))
            merged[(row.material_key, row.week_start.isoformat())] = payload
        self._write(WEEKLY_FILE, [merged[key] for key in sorted(merged)])
        return len(rows)

    def _read(self, filename: str) -> list[Any]:
        path = self._output_dir / filename
        if not path.exists():
            return []
        data = json.loads(path.read_text(encoding="utf-8"))
        return data if isinstance(data, list) else []

    def _write(self, filename: str, payload: list[dict[str, Any]]) -> Path:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        path = self._output_dir / filename
        path.write_text(json.dumps(payload, indent=2, default=_json_default), encoding="utf-8")
        return path


def _json_default(value: object) -> str:
    isoformat = getattr(value, "isoformat", None)
    if callable(isoformat):
        return isoformat()
    return str(value)
