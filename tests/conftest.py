"""
Shared fixtures for the price pipeline tests.

Nothing here touches the network or a database: HTTP goes through a
scripted fake session and storage through an in-memory recorder.
"""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from pricescraper.scraping.config.models import PriceScrapingSettings
from pricescraper.scraping.storage.base import PriceStorage


class FakeResponse:
    def __init__(self, status_code: int, text: str = "", headers: dict[str, str] | None = None) -> None:
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}


class FakeSession:
    """
    Scripted stand-in for ``requests.Session``.

    ``routes`` maps a URL to a response, an exception, or a list of those
    served in order (the last entry repeats). Unknown URLs get a 404.
    """

    def __init__(self, routes: dict[str, object] | None = None, on_get=None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[tuple[str, dict[str, str]]] = []
        self._on_get = on_get

    def get(self, url: str, *, headers=None, timeout=None, allow_redirects=True):
        self.calls.append((url, dict(headers or {})))
        if self._on_get is not None:
            self._on_get(url)

        route = self.routes.get(url, FakeResponse(404))
        if isinstance(route, list):
            outcome = route.pop(0) if len(route) > 1 else route[0]
        else:
            outcome = route
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]


class InMemoryStorage(PriceStorage):
    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.calls: list[str] = []
        self.observations: list = []
        self.unmatched: list = []
        self.weekly: list = []

    def insert_observations(self, rows: Sequence) -> int:
        return self._record("observations", self.observations, rows)

    def insert_unmatched(self, rows: Sequence) -> int:
        return self._record("unmatched", self.unmatched, rows)

    def upsert_weekly(self, rows: Sequence) -> int:
        return self._record("weekly", self.weekly, rows)

    def _record(self, batch: str, target: list, rows: Sequence) -> int:
        self.calls.append(batch)
        if batch == self.fail_on:
            raise RuntimeError("storage unreachable")
        target.extend(rows)
        return len(rows)


def make_settings(**overrides) -> PriceScrapingSettings:
    values = {
        "sources_path": "unused-sources.json",
        "aliases_path": "unused-aliases.json",
        "default_user_agent": "price-tests/1.0",
        "max_retries": 1,
        "backoff_initial_seconds": 0.0,
        "source_delay_seconds": 0.0,
    }
    values.update(overrides)
    return PriceScrapingSettings(**values)


@pytest.fixture()
def settings() -> PriceScrapingSettings:
    return make_settings()


@pytest.fixture()
def fake_response():
    return FakeResponse


@pytest.fixture()
def fake_session():
    return FakeSession


@pytest.fixture()
def memory_storage():
    return InMemoryStorage


@pytest.fixture()
def settings_factory():
    return make_settings
