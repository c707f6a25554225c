"""
Builds persisted price observations from raw listings.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

from pricescraper.domain import Currency, PriceObservation, RawListing, UnmatchedReason
from pricescraper.scraping.config.models import SourceConfig
from pricescraper.scraping.parsing import ParsedPrice, parse_price

DEFAULT_CONFIDENCE = 2
_LOCATION_PREFIX = re.compile(r"^location\s*:\s*", flags=re.IGNORECASE)
_SUPPLIER_PREFIX = re.compile(r"^by\s+", flags=re.IGNORECASE)


class ObservationBuilder:
    """
    Combine a raw listing, a resolved material key and an optional exchange
    rate into a ``PriceObservation``.

    The exchange rate is an explicit argument so one run can be replayed with
    the same inputs.
    """

    def build(
        self,
        *,
        source: SourceConfig,
        listing: RawListing,
        material_key: str | None,
        exchange_rate: float | None,
        scraped_at: datetime,
    ) -> PriceObservation | None:
        if material_key is None:
            return None

        parsed = parse_price(listing.price)
        currency = self._resolve_currency(parsed, source)
        if parsed.price is None or parsed.price <= 0 or currency is None:
            return None

        price_usd: float | None = None
        price_zwg: float | None = None
        rate = exchange_rate if exchange_rate and exchange_rate > 0 else None
        if currency == Currency.USD:
            price_usd = parsed.price
            if rate is not None:
                price_zwg = round(parsed.price * rate, 2)
        else:
            price_zwg = parsed.price
            if rate is not None:
                price_usd = round(parsed.price / rate, 2)

        return PriceObservation(
            source_id=source.source_id or None,
            source_name=source.display_name,
            material_key=material_key,
            material_name=listing.name,
            unit=_clean(listing.unit),
            price_original=parsed.price,
            currency=currency,
            price_usd=price_usd,
            price_zwg=price_zwg,
            location=_strip_prefix(listing.location, _LOCATION_PREFIX),
            supplier_name=_strip_prefix(listing.supplier, _SUPPLIER_PREFIX),
            url=safe_url(listing.url),
            confidence=self.confidence_for(source),
            scraped_at=as_utc(scraped_at),
        )

    def rejection_reason(
        self,
        *,
        source: SourceConfig,
        listing: RawListing,
        material_key: str | None,
    ) -> str:
        """
        Diagnostic reason for a listing that ``build`` returned None for.
        """

        if material_key is None:
            return UnmatchedReason.UNMATCHED_MATERIAL
        parsed = parse_price(listing.price)
        if parsed.price is None or parsed.price <= 0:
            return UnmatchedReason.UNPARSEABLE_PRICE
        return UnmatchedReason.UNKNOWN_CURRENCY

    @staticmethod
    def confidence_for(source: SourceConfig) -> int:
        if source.trust_level is None:
            return DEFAULT_CONFIDENCE
        return min(5, max(1, source.trust_level))

    @staticmethod
    def _resolve_currency(parsed: ParsedPrice, source: SourceConfig) -> str | None:
        return parsed.currency or source.default_currency


def safe_url(url: str | None) -> str | None:
    if url and url.strip().lower().startswith(("http://", "https://")):
        return url.strip()
    return None


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = re.sub(r"\s+", " ", value).strip()
    return cleaned or None


def _strip_prefix(value: str | None, prefix: re.Pattern[str]) -> str | None:
    if value is None:
        return None
    return _clean(prefix.sub("", value.strip()))
