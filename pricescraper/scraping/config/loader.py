"""
Environment + JSON config loader for price scraping.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path

from db.config import load_env_files

from pricescraper.scraping.config.models import PriceScrapingSettings, SourceConfig

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)
PARSER_ALIASES = {"listing-card": "card"}
SOURCE_TYPES = {"supplier", "classified", "retailer", "other"}
CURRENCIES = {"USD", "ZWG"}


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _resolve_path(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (_project_root() / candidate).resolve()


@lru_cache(maxsize=1)
def get_price_scraping_settings() -> PriceScrapingSettings:
    """
    Return cached price scraping settings from environment variables.
    """

    load_env_files()
    rate_override = _optional_float(os.getenv("PRICE_EXCHANGE_RATE"))
    return PriceScrapingSettings(
        sources_path=str(
            _resolve_path(
                _get_str_env("PRICE_SOURCES_FILE", "pricescraper/scraping/config/sources.json")
            )
        ),
        aliases_path=str(
            _resolve_path(
                _get_str_env(
                    "MATERIAL_ALIASES_FILE",
                    "pricescraper/scraping/config/material-aliases.json",
                )
            )
        ),
        default_user_agent=_get_str_env("PRICE_SCRAPE_USER_AGENT", DEFAULT_USER_AGENT),
        timeout_seconds=max(1.0, _get_float_env("PRICE_SCRAPE_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("PRICE_SCRAPE_MAX_RETRIES", 2)),
        backoff_initial_seconds=max(
            0.0,
            _get_float_env("PRICE_SCRAPE_BACKOFF_INITIAL_SECONDS", 0.5),
        ),
        backoff_multiplier=max(1.0, _get_float_env("PRICE_SCRAPE_BACKOFF_MULTIPLIER", 2.0)),
        source_delay_seconds=max(
            0.0,
            _get_float_env("PRICE_SCRAPE_SOURCE_DELAY_SECONDS", 0.5),
        ),
        max_workers=max(1, _get_int_env("PRICE_SCRAPE_MAX_WORKERS", 1)),
        storage_batch_size=max(1, _get_int_env("PRICE_SCRAPE_STORAGE_BATCH_SIZE", 500)),
        output_dir=str(_resolve_path(_get_str_env("SCRAPE_OUTPUT_DIR", "output/prices"))),
        dry_run=_get_bool_env("DRY_RUN", False),
        exchange_rate_override=rate_override if rate_override and rate_override > 0 else None,
    )


def load_source_configs(*, config_path: str) -> list[SourceConfig]:
    """
    Load price source configurations from a JSON file.

    The file holds either ``{"sources": [...]}`` or a bare list. Entries
    missing both name and id, or missing a URL, are skipped.
    """

    path = _resolve_path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Price source config file not found: {path}")

    raw_data = json.loads(path.read_text(encoding="utf-8"))
    entries = raw_data.get("sources", []) if isinstance(raw_data, dict) else raw_data
    if not isinstance(entries, list):
        raise ValueError("Invalid price source config: 'sources' must be a list.")
    return parse_source_configs(entries)


def parse_source_configs(entries: list[object]) -> list[SourceConfig]:
    parsed: list[SourceConfig] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue

        source_id = _optional_str(entry.get("id")) or _optional_str(entry.get("source_id"))
        name = _optional_str(entry.get("name"))
        url = _optional_str(entry.get("url")) or _optional_str(entry.get("base_url"))
        if not (source_id or name) or not url:
            continue

        parser = (_optional_str(entry.get("parser")) or "card").lower()
        source_type = (
            _optional_str(entry.get("source_type")) or _optional_str(entry.get("sourceType")) or "other"
        ).lower()
        default_currency = (
            _optional_str(entry.get("default_currency"))
            or _optional_str(entry.get("defaultCurrency"))
            or ""
        ).upper()

        parsed.append(
            SourceConfig(
                source_id=source_id or name or "",
                name=name or source_id or "",
                url=url,
                parser=PARSER_ALIASES.get(parser, parser),
                selectors=_normalize_string_map(entry.get("selectors", {}), lower_keys=True),
                ignore_patterns=_normalize_patterns(
                    _first_present(entry, "ignore_patterns", "ignorePatterns")
                ),
                headers=_normalize_string_map(entry.get("headers", {}), lower_keys=False),
                is_active=_optional_bool(_first_present(entry, "is_active", "isActive"), True),
                trust_level=_optional_trust_level(
                    _first_present(entry, "trust_level", "trustLevel")
                ),
                source_type=source_type if source_type in SOURCE_TYPES else "other",
                default_currency=default_currency if default_currency in CURRENCIES else None,
                extractor_class=_optional_str(
                    _first_present(entry, "extractor_class", "extractorClass")
                ),
            )
        )

    return parsed


def load_alias_mapping(*, aliases_path: str) -> dict[str, str]:
    """
    Load the raw ``alias -> material_key`` mapping from a JSON object file.
    """

    path = _resolve_path(aliases_path)
    if not path.exists():
        raise FileNotFoundError(f"Material alias file not found: {path}")

    raw_data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw_data, dict):
        raise ValueError("Invalid material alias file: expected a JSON object.")
    return {
        str(alias): str(key).strip()
        for alias, key in raw_data.items()
        if isinstance(key, str) and key.strip()
    }


def _first_present(entry: dict, *keys: str) -> object:
    for key in keys:
        if key in entry:
            return entry[key]
    return None


def _normalize_string_map(values: object, *, lower_keys: bool) -> dict[str, str]:
    if not isinstance(values, dict):
        return {}

    normalized: dict[str, str] = {}
    for key, value in values.items():
        if not isinstance(key, str) or not isinstance(value, str):
            continue
        if key.strip() and value.strip():
            clean_key = key.strip().lower() if lower_keys else key.strip()
            normalized[clean_key] = value.strip()
    return normalized


def _normalize_patterns(values: object) -> tuple[str, ...]:
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, list):
        return ()
    return tuple(item.strip() for item in values if isinstance(item, str) and item.strip())


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        return None
    stripped = str(value).strip()
    return stripped or None


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_trust_level(value: object) -> int | None:
    parsed = _optional_float(value)
    if parsed is None:
        return None
    return min(5, max(1, int(parsed)))


def _optional_bool(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default
