"""
tests/test_fetcher.py

PageFetcher redirect, 403 retry, header and error behaviour over a fake session.
"""

from __future__ import annotations

import threading

import requests

from pricescraper.scraping.config.models import SourceConfig
from pricescraper.scraping.extractors import CardListingExtractor
from pricescraper.scraping.fetcher import PageFetcher
from pricescraper.scraping.parsing import SoupDocument

URL = "https://shop.example/catalog"
PAGE = """
<div class="listing"><span class="title">River sand</span><span class="price">US$ 35</span></div>
<div class="listing"><span class="title">PPC Surecem 32.5</span><span class="price">$12.50</span></div>
"""


def _listings(document: str | None):
    source = SourceConfig(source_id="shop", name="Shop", url=URL)
    return CardListingExtractor().extract(SoupDocument.from_html(document or ""), source)


def test_plain_success(settings, fake_session, fake_response) -> None:
    session = fake_session({URL: fake_response(200, PAGE)})

    result = PageFetcher(settings=settings, session=session).fetch(URL)

    assert result.ok
    assert result.status_code == 200
    assert result.final_url == URL
    assert result.document == PAGE


def test_forbidden_retry_yields_same_listings_as_direct_success(settings, fake_session, fake_response) -> None:
    direct = PageFetcher(settings=settings, session=fake_session({URL: fake_response(200, PAGE)}))
    retry_session = fake_session({URL: [fake_response(403), fake_response(200, PAGE)]})
    retried = PageFetcher(settings=settings, session=retry_session)

    direct_result = direct.fetch(URL)
    retried_result = retried.fetch(URL)

    assert retried_result.ok
    assert _listings(retried_result.document) == _listings(direct_result.document)
    assert len(retry_session.calls) == 2
    retry_headers = retry_session.calls[1][1]
    assert retry_headers["Referer"] == URL
    assert retry_headers["Upgrade-Insecure-Requests"] == "1"
    assert "Referer" not in retry_session.calls[0][1]


def test_forbidden_twice_is_failure(settings, fake_session, fake_response) -> None:
    session = fake_session({URL: fake_response(403)})

    result = PageFetcher(settings=settings, session=session).fetch(URL)

    assert not result.ok
    assert result.status_code == 403
    assert result.document is None
    assert len(session.calls) == 2


def test_relative_redirect_followed_once(settings, fake_session, fake_response) -> None:
    target = "https://shop.example/products?page=1"
    session = fake_session(
        {
            URL: fake_response(302, headers={"Location": "/products?page=1"}),
            target: fake_response(200, PAGE),
        }
    )

    result = PageFetcher(settings=settings, session=session).fetch(URL)

    assert result.ok
    assert result.url == URL
    assert result.final_url == target
    assert session.urls() == [URL, target]


def test_second_redirect_is_failure(settings, fake_session, fake_response) -> None:
    session = fake_session(
        {
            URL: fake_response(301, headers={"Location": "https://cdn.example/a"}),
            "https://cdn.example/a": fake_response(302, headers={"Location": "https://cdn.example/b"}),
        }
    )

    result = PageFetcher(settings=settings, session=session).fetch(URL)

    assert not result.ok
    assert result.status_code == 302
    assert session.urls() == [URL, "https://cdn.example/a"]


def test_server_error_is_failure_value(settings, fake_session, fake_response) -> None:
    result = PageFetcher(settings=settings, session=fake_session({URL: fake_response(503)})).fetch(URL)

    assert not result.ok
    assert result.error == "HTTP 503"


def test_connection_errors_retried_then_reported(settings, fake_session) -> None:
    session = fake_session({URL: requests.ConnectionError("connection refused")})

    result = PageFetcher(settings=settings, session=session).fetch(URL)

    assert not result.ok
    assert result.status_code is None
    assert "connection refused" in (result.error or "")
    assert len(session.calls) == settings.max_retries + 1


def test_timeout_then_success(settings, fake_session, fake_response) -> None:
    session = fake_session({URL: [requests.Timeout("slow"), fake_response(200, PAGE)]})

    result = PageFetcher(settings=settings, session=session).fetch(URL)

    assert result.ok
    assert len(session.calls) == 2


def test_source_headers_override_defaults_and_keep_the_rest(settings, fake_session, fake_response) -> None:
    session = fake_session({URL: fake_response(200, PAGE)})
    fetcher = PageFetcher(settings=settings, session=session)

    fetcher.fetch(URL, {"User-Agent": "custom-agent", "X-Api-Key": "abc"})

    sent = session.calls[0][1]
    assert sent["User-Agent"] == "custom-agent"
    assert sent["X-Api-Key"] == "abc"
    assert sent["Accept-Language"] == fetcher.default_headers["Accept-Language"]
    assert fetcher.default_headers["User-Agent"] == settings.default_user_agent


def test_each_thread_gets_its_own_session(settings) -> None:
    fetcher = PageFetcher(settings=settings)
    seen: list[requests.Session] = []

    worker = threading.Thread(target=lambda: seen.append(fetcher.session))
    worker.start()
    worker.join()

    assert isinstance(fetcher.session, requests.Session)
    assert fetcher.session is fetcher.session
    assert seen[0] is not fetcher.session


def test_injected_session_is_shared(settings, fake_session) -> None:
    session = fake_session()
    fetcher = PageFetcher(settings=settings, session=session)
    seen: list[object] = []

    worker = threading.Thread(target=lambda: seen.append(fetcher.session))
    worker.start()
    worker.join()

    assert fetcher.session is session
    assert seen == [session]
