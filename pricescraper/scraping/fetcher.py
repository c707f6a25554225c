"""
HTTP fetcher for price source pages.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import urljoin

import requests

from pricescraper.scraping.config.models import PriceScrapingSettings
from pricescraper.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)

DEFAULT_BROWSER_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


@dataclass(frozen=True)
class FetchResult:
    """
    Outcome of one fetch. Failures are values: ``document`` is None and ``error`` is set.
    """

    url: str
    final_url: str
    status_code: int | None
    document: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.document is not None and self.error is None


class PageFetcher:
    """
    Fetches one page with a single redirect hop and a single 403 retry.

    Redirects are followed manually and at most once; a redirect that leads
    to another redirect is reported as a failure. Connection errors and
    timeouts are retried with exponential backoff.

    Without an injected session each thread gets its own ``requests.Session``.
    """

    def __init__(
        self,
        *,
        settings: PriceScrapingSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._shared_session = session
        self._local = threading.local()
        self.default_headers = {
            "User-Agent": settings.default_user_agent,
            **DEFAULT_BROWSER_HEADERS,
        }

    @property
    def session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session

    def build_headers(self, overrides: Mapping[str, str] | None = None) -> dict[str, str]:
        return {**self.default_headers, **(overrides or {})}

    def fetch(self, url: str, headers: Mapping[str, str] | None = None) -> FetchResult:
        request_headers = self.build_headers(headers)
        try:
            response = self._get(url, request_headers)

            if 300 <= response.status_code < 400:
                location = response.headers.get("Location")
                if location:
                    return self._follow_redirect(url, urljoin(url, location), request_headers)

            if response.status_code == 403:
                retry_headers = {
                    **request_headers,
                    "Referer": url,
                    "Upgrade-Insecure-Requests": "1",
                }
                log_event(logger, logging.INFO, "fetch_forbidden_retry", url=url)
                response = self._get(url, retry_headers)
        except requests.RequestException as exc:
            return self._failure(url, url, None, f"request failed: {exc}")

        if not _is_success(response):
            return self._failure(url, url, response.status_code, f"HTTP {response.status_code}")
        return self._success(url, url, response)

    def _follow_redirect(
        self,
        url: str,
        target: str,
        headers: dict[str, str],
    ) -> FetchResult:
        log_event(logger, logging.INFO, "fetch_redirected", url=url, target=target)
        response = self._get(target, headers)
        if not _is_success(response):
            return self._failure(url, target, response.status_code, f"HTTP {response.status_code}")
        return self._success(url, target, response)

    def _get(self, url: str, headers: dict[str, str]) -> requests.Response:
        last_error: requests.RequestException = requests.ConnectionError(f"no attempt made for {url}")

        for attempt in range(self._settings.max_retries + 1):
            try:
                return self.session.get(
                    url,
                    headers=headers,
                    timeout=self._settings.timeout_seconds,
                    allow_redirects=False,
                )
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc

            if attempt >= self._settings.max_retries:
                break

            backoff_seconds = self._settings.backoff_initial_seconds * (
                self._settings.backoff_multiplier**attempt
            )
            time.sleep(backoff_seconds)

        raise last_error

    @staticmethod
    def _success(url: str, final_url: str, response: requests.Response) -> FetchResult:
        log_event(
            logger,
            logging.DEBUG,
            "fetch_succeeded",
            url=url,
            final_url=final_url,
            status_code=response.status_code,
        )
        return FetchResult(
            url=url,
            final_url=final_url,
            status_code=response.status_code,
            document=response.text,
        )

    @staticmethod
    def _failure(url: str, final_url: str, status_code: int | None, error: str) -> FetchResult:
        log_event(
            logger,
            logging.WARNING,
            "fetch_failed",
            url=url,
            final_url=final_url,
            status_code=status_code,
            error=error,
        )
        return FetchResult(url=url, final_url=final_url, status_code=status_code, error=error)


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300
