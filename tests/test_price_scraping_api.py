from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from db.session import get_optional_db
from pricescraper.domain import RunReport, SourceError, SourceRunSummary, SourceStatus
from pricescraper.main import app
from pricescraper.scraping.errors import PersistenceError
from pricescraper.services.price_scraping_service import get_price_scraping_service


class _StubService:
    def __init__(self, outcome: RunReport | Exception) -> None:
        self.outcome = outcome
        self.calls: list[dict] = []

    def ingest(self, **kwargs) -> RunReport:
        self.calls.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _db_override():
    yield MagicMock()


@pytest.fixture()
def client_for():
    def _build(service: _StubService) -> TestClient:
        app.dependency_overrides[get_optional_db] = _db_override
        app.dependency_overrides[get_price_scraping_service] = lambda: service
        return TestClient(app)

    yield _build
    app.dependency_overrides.clear()


def _report() -> RunReport:
    return RunReport(
        sources=[
            SourceRunSummary(
                source="Shop",
                status=SourceStatus.SUCCESS,
                listings_found=3,
                observations_built=1,
                unmatched_count=2,
            ),
            SourceRunSummary(source="Broken", status=SourceStatus.FAILED, error="HTTP 500"),
        ],
        source_errors=[SourceError(source="Broken", stage="fetch", message="HTTP 500", status_code=500)],
        exchange_rate=26.8,
        persisted=True,
    )


def test_health() -> None:
    assert TestClient(app).get("/health").json() == {"status": "ok"}


def test_ingest_returns_run_summary(client_for) -> None:
    service = _StubService(_report())

    response = client_for(service).post("/ingest-prices", params={"source": "Shop", "dry_run": "true"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["exchange_rate"] == 26.8
    assert payload["persisted"] is True
    assert payload["observations"] == 0
    assert [item["status"] for item in payload["sources"]] == ["success", "failed"]
    assert payload["source_errors"][0] == {
        "source": "Broken",
        "stage": "fetch",
        "message": "HTTP 500",
        "status_code": 500,
    }
    assert service.calls[0]["source"] == "Shop"
    assert service.calls[0]["dry_run"] is True


def test_configuration_errors_map_to_400(client_for) -> None:
    response = client_for(_StubService(ValueError("No price sources configured."))).post("/ingest-prices")

    assert response.status_code == 400
    assert response.json()["detail"] == "No price sources configured."


def test_persistence_errors_map_to_503(client_for) -> None:
    error = PersistenceError("Failed to persist weekly batch (2 rows)", batch="weekly", row_count=2)

    response = client_for(_StubService(error)).post("/ingest-prices")

    assert response.status_code == 503


def test_cancelled_run_reports_skipped_sources(client_for) -> None:
    report = RunReport(cancelled=True)
    report.sources.append(SourceRunSummary(source="Shop", status=SourceStatus.SKIPPED))

    payload = client_for(_StubService(report)).post("/ingest-prices").json()

    assert payload["cancelled"] is True
    assert payload["sources"][0]["status"] == "skipped"


def test_dry_run_does_not_open_a_database_session(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DATABASE_URL", "CLOUD_DATABASE_URL", "LOCAL_DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    service = _StubService(RunReport())
    app.dependency_overrides[get_price_scraping_service] = lambda: service
    try:
        response = TestClient(app).post("/ingest-prices", params={"dry_run": "true"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert service.calls[0]["db"] is None
    assert service.calls[0]["dry_run"] is True


def test_database_run_uses_a_session(client_for) -> None:
    service = _StubService(RunReport())

    client_for(service).post("/ingest-prices")

    assert service.calls[0]["db"] is not None
    assert service.calls[0]["dry_run"] is False
