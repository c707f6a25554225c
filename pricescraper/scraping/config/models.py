"""
Price scraping configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SourceConfig:
    """
    One scrapeable price source.
    """

    source_id: str
    name: str
    url: str
    parser: str = "card"
    selectors: dict[str, str] = field(default_factory=dict)
    ignore_patterns: tuple[str, ...] = ()
    headers: dict[str, str] = field(default_factory=dict)
    is_active: bool = True
    trust_level: int | None = None
    source_type: str = "other"
    default_currency: str | None = None
    extractor_class: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.source_id


@dataclass(frozen=True)
class PriceScrapingSettings:
    """
    Runtime settings for price scraping.
    """

    sources_path: str
    aliases_path: str
    default_user_agent: str
    timeout_seconds: float = 15.0
    max_retries: int = 2
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    source_delay_seconds: float = 0.5
    max_workers: int = 1
    storage_batch_size: int = 500
    output_dir: str = "output/prices"
    dry_run: bool = False
    exchange_rate_override: float | None = None
