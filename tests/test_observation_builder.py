from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from pricescraper.domain import Currency, RawListing, UnmatchedReason
from pricescraper.scraping.config.models import SourceConfig
from pricescraper.scraping.normalization import ObservationBuilder

SCRAPED_AT = datetime(2026, 10, 14, 8, 30, tzinfo=timezone.utc)


def _source(**overrides) -> SourceConfig:
    values = {"source_id": "halsteds", "name": "Halsteds", "url": "https://halsteds.example"}
    values.update(overrides)
    return SourceConfig(**values)


def _build(listing: RawListing, *, source: SourceConfig | None = None, key: str | None = "cement", rate=None):
    return ObservationBuilder().build(
        source=source or _source(),
        listing=listing,
        material_key=key,
        exchange_rate=rate,
        scraped_at=SCRAPED_AT,
    )


class TestObservationBuilder:
    def test_usd_price_converted_to_zwg(self) -> None:
        observation = _build(RawListing(name="PPC Surecem 32.5", price="$12.50"), rate=26.8)

        assert observation is not None
        assert observation.currency == Currency.USD
        assert observation.price_original == 12.5
        assert observation.price_usd == 12.5
        assert observation.price_zwg == 335.0
        assert observation.source_name == "Halsteds"
        assert observation.source_id == "halsteds"

    def test_zwg_price_converted_to_usd(self) -> None:
        observation = _build(RawListing(name="Cement", price="ZWG 335"), rate=26.8)

        assert observation is not None
        assert observation.price_zwg == 335.0
        assert observation.price_usd == 12.5

    def test_missing_rate_leaves_other_currency_empty(self) -> None:
        observation = _build(RawListing(name="Cement", price="USD 12"), rate=None)

        assert observation is not None
        assert observation.price_usd == 12.0
        assert observation.price_zwg is None

    def test_non_positive_rate_is_ignored(self) -> None:
        observation = _build(RawListing(name="Cement", price="USD 12"), rate=0)
        assert observation is not None and observation.price_zwg is None

    def test_default_currency_used_when_text_has_no_marker(self) -> None:
        observation = _build(RawListing(name="Cement", price="12.50"), source=_source(default_currency="USD"))
        assert observation is not None and observation.currency == Currency.USD

    def test_optional_fields_cleaned(self) -> None:
        listing = RawListing(
            name="Cement",
            price="$10",
            unit="  50kg   bag ",
            location="Location: Msasa, Harare",
            supplier="by Builders Hub",
            url="/relative/link",
        )

        observation = _build(listing)

        assert observation is not None
        assert observation.unit == "50kg bag"
        assert observation.location == "Msasa, Harare"
        assert observation.supplier_name == "Builders Hub"
        assert observation.url is None

    def test_scraped_at_normalized_to_utc(self) -> None:
        local = datetime(2026, 10, 14, 10, 30, tzinfo=timezone(timedelta(hours=2)))

        observation = ObservationBuilder().build(
            source=_source(),
            listing=RawListing(name="Cement", price="$10"),
            material_key="cement",
            exchange_rate=None,
            scraped_at=local,
        )

        assert observation is not None
        assert observation.scraped_at == SCRAPED_AT
        assert observation.scraped_at.tzinfo == timezone.utc

    @pytest.mark.parametrize(("trust_level", "expected"), [(None, 2), (4, 4), (9, 5), (0, 1)])
    def test_confidence_from_trust_level(self, trust_level, expected) -> None:
        assert ObservationBuilder.confidence_for(_source(trust_level=trust_level)) == expected


class TestRejections:
    @pytest.mark.parametrize(
        ("listing", "key", "reason"),
        [
            (RawListing(name="Garden hose", price="$10"), None, UnmatchedReason.UNMATCHED_MATERIAL),
            (RawListing(name="Cement", price="Call for price"), "cement", UnmatchedReason.UNPARSEABLE_PRICE),
            (RawListing(name="Cement", price="$0.00"), "cement", UnmatchedReason.UNPARSEABLE_PRICE),
            (RawListing(name="Cement", price="12.50"), "cement", UnmatchedReason.UNKNOWN_CURRENCY),
        ],
    )
    def test_rejected_listing_has_reason(self, listing: RawListing, key: str | None, reason: str) -> None:
        builder = ObservationBuilder()

        assert _build(listing, key=key) is None
        assert builder.rejection_reason(source=_source(), listing=listing, material_key=key) == reason
