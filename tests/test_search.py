"""Tests for search endpoints in the company finder.

Tests cover the search router endpoints including company search,
status, stored search history and export. The orchestrator and the
geocoder are replaced so no request leaves the process.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import status

from app.core.config import Settings
from app.db.deps import get_db
from app.main import app
from app.models import Company, Contact, Coordinates, SearchQuery, SearchRunResult
from app.repositories.search_result_repository import SearchResultRepository
from app.routers import search as search_router
from app.services import search_orchestrator
from app.services.adapter_catalog import get_definition
from app.services.errors import LocationNotFoundError
from app.services.search_orchestrator import EMPTY_ADVISORY, SearchOrchestrator

PUNE = Coordinates(lat=18.5204, lng=73.8567)


@pytest.fixture
def mock_geocoder(monkeypatch):
    geocoder = MagicMock()
    geocoder.geocode = AsyncMock(return_value=PUNE)
    monkeypatch.setattr(search_router, "get_geocoding_service", lambda: geocoder)
    return geocoder


@pytest.fixture
def mock_orchestrator(monkeypatch):
    orchestrator = MagicMock()
    orchestrator.search = AsyncMock(return_value=SearchRunResult(
        entities=[
            Company(
                name="Acme Tech Pvt Ltd",
                contact=Contact(phone="9876543210"),
                source="Naukri",
            ),
        ],
        region="india",
        attempts=["Pune, India (10000 m)"],
    ))
    monkeypatch.setattr(search_router, "get_search_orchestrator", lambda: orchestrator)
    return orchestrator


@pytest.fixture
def mock_save(monkeypatch):
    save = MagicMock()
    monkeypatch.setattr(search_router, "save_search_in_background", save)
    return save


@pytest.fixture
def override_db(db_session_factory):
    def _get_test_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    yield db_session_factory
    app.dependency_overrides.pop(get_db, None)


class TestSearchEndpoint:
    """Test suite for POST /api/search endpoint."""

    def test_search_returns_ranked_results(self, client, mock_geocoder, mock_orchestrator, mock_save):
        """Test a successful search with camelCase output."""
        response = client.post(
            "/api/search",
            json={"location": "Pune, India", "skills": ["python"], "radiusMeters": 5000},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()

        assert data["total"] == 1
        assert data["region"] == "india"
        assert data["advisory"] is None
        assert data["attempts"] == ["Pune, India (10000 m)"]
        result = data["results"][0]
        assert result["name"] == "Acme Tech Pvt Ltd"
        assert result["contact"]["phone"] == "9876543210"
        assert result["businessStatus"] == "operational"
        assert data["query"]["locationText"] == "Pune, India"
        assert data["query"]["radiusMeters"] == 5000
        assert data["query"]["coordinates"] == {"lat": PUNE.lat, "lng": PUNE.lng}

    def test_search_geocodes_missing_coordinates(self, client, mock_geocoder, mock_orchestrator, mock_save):
        client.post("/api/search", json={"location": "Pune, India"})

        mock_geocoder.geocode.assert_awaited_once_with("Pune, India")
        query = mock_orchestrator.search.await_args.args[0]
        assert query.coordinates == PUNE
        assert query.radius_meters == 10000
        assert query.skill_tags == ()

    def test_search_keeps_given_coordinates(self, client, mock_geocoder, mock_orchestrator, mock_save):
        client.post(
            "/api/search",
            json={"location": "Somewhere", "coordinates": {"lat": 10.0, "lng": 20.0}},
        )

        mock_geocoder.geocode.assert_not_awaited()
        query = mock_orchestrator.search.await_args.args[0]
        assert query.coordinates == Coordinates(lat=10.0, lng=20.0)

    def test_search_stores_results_in_background(self, client, mock_geocoder, mock_orchestrator, mock_save):
        client.post("/api/search", json={"location": "Pune, India"})

        mock_save.assert_called_once()
        _, query, result = mock_save.call_args.args
        assert query.location_text == "Pune, India"
        assert len(result.entities) == 1

    def test_search_empty_location_returns_400(self, client, mock_geocoder, mock_orchestrator):
        response = client.post("/api/search", json={"location": "   "})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_orchestrator.search.assert_not_awaited()

    def test_search_missing_location_returns_422(self, client):
        response = client.post("/api/search", json={"skills": ["python"]})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_search_ungeocoded_place_returns_advisory(self, client, monkeypatch, mock_save):
        """Test that a place nobody can geocode still searches and ends empty."""
        geocoder = MagicMock()
        geocoder.geocode = AsyncMock(side_effect=LocationNotFoundError("Nowhereville"))
        monkeypatch.setattr(search_router, "get_geocoding_service", lambda: geocoder)
        orchestrator = SearchOrchestrator(
            settings=Settings(adapter_delay_seconds=0.0),
            adapter_factory=lambda definitions: [],
        )
        monkeypatch.setattr(search_router, "get_search_orchestrator", lambda: orchestrator)

        response = client.post(
            "/api/search",
            json={"location": "Nowhereville", "skills": ["Underwater Basket Weaving"]},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["results"] == []
        assert data["advisory"] == EMPTY_ADVISORY
        assert len(data["attempts"]) == 3
        mock_save.assert_not_called()

    def test_search_without_coordinates_returns_400(self, client, monkeypatch, mock_save):
        """Test that a bundle of coordinate-only adapters rejects an ungeocoded place."""
        geocoder = MagicMock()
        geocoder.geocode = AsyncMock(side_effect=LocationNotFoundError("Nowhereville"))
        monkeypatch.setattr(search_router, "get_geocoding_service", lambda: geocoder)
        monkeypatch.setattr(
            search_orchestrator,
            "bundle_for",
            lambda region, settings: [get_definition("OpenStreetMap")],
        )
        orchestrator = SearchOrchestrator(
            settings=Settings(adapter_delay_seconds=0.0),
            adapter_factory=lambda definitions: [],
        )
        monkeypatch.setattr(search_router, "get_search_orchestrator", lambda: orchestrator)

        response = client.post("/api/search", json={"location": "Nowhereville"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Coordinates are required" in response.json()["detail"]
        mock_save.assert_not_called()

    def test_search_no_results_found(self, client, mock_geocoder, monkeypatch, mock_save):
        """Test that an empty search returns 200 with an advisory."""
        orchestrator = MagicMock()
        orchestrator.search = AsyncMock(return_value=SearchRunResult(
            entities=[],
            advisory=EMPTY_ADVISORY,
            region="global",
            attempts=["Nowhereville (10000 m)", "Nowhereville (20000 m)", "Nowhereville (40000 m)"],
        ))
        monkeypatch.setattr(search_router, "get_search_orchestrator", lambda: orchestrator)

        response = client.post("/api/search", json={"location": "Nowhereville"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 0
        assert data["results"] == []
        assert data["advisory"] == EMPTY_ADVISORY
        assert len(data["attempts"]) == 3
        mock_save.assert_not_called()


class TestSearchStatusEndpoint:
    """Test suite for GET /api/search/status endpoint."""

    def test_get_search_status(self, client):
        response = client.get("/api/search/status")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()

        labels = [source["label"] for source in data["sources"]]
        assert "Naukri" in labels
        assert "OpenStreetMap" in labels
        assert set(data["bundles"]) == {"india", "global"}
        assert data["bundles"]["india"][-1] == "Verified Companies"
        assert isinstance(data["htmlListingsEnabled"], bool)
        assert data["maxResults"] > 0

    def test_status_marks_coordinate_sources(self, client):
        data = client.get("/api/search/status").json()
        by_label = {source["label"]: source for source in data["sources"]}

        assert by_label["OpenStreetMap"]["requiresCoordinates"] is True
        assert by_label["Naukri"]["requiresCoordinates"] is False
        assert by_label["Indeed"]["kind"] == "html_listing"


class TestSearchHistoryEndpoints:
    """Test suite for the stored search endpoints."""

    def _store(self, session_factory, location: str) -> str:
        db = session_factory()
        try:
            record = SearchResultRepository(db).save(
                SearchQuery(location_text=location),
                SearchRunResult(entities=[Company(name="Zephyr Labs")]),
            )
        finally:
            db.close()
        return record.id

    def test_history_lists_records(self, client, override_db):
        self._store(override_db, "Pune")
        self._store(override_db, "Jaipur")

        response = client.get("/api/search/history")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 2
        record = data["records"][0]
        assert record["totalResults"] == 1
        assert record["entities"][0]["name"] == "Zephyr Labs"

    def test_history_location_filter(self, client, override_db):
        self._store(override_db, "Pune")
        self._store(override_db, "Jaipur")

        data = client.get("/api/search/history", params={"location": "pune"}).json()

        assert [r["query"]["locationText"] for r in data["records"]] == ["Pune"]

    def test_history_limit_validated(self, client, override_db):
        response = client.get("/api/search/history", params={"limit": 0})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_delete_history_record(self, client, override_db):
        record_id = self._store(override_db, "Pune")

        response = client.delete(f"/api/search/history/{record_id}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert client.get("/api/search/history").json()["total"] == 0

    def test_delete_missing_record_returns_404(self, client, override_db):
        response = client.delete("/api/search/history/does-not-exist")
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestExportEndpoint:
    """Test suite for POST /api/search/export endpoint."""

    def test_export_csv(self, client, mock_geocoder, mock_orchestrator):
        response = client.post(
            "/api/search/export",
            json={"location": "Pune, India", "skills": ["python"]},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/csv")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith("attachment; filename=internships-pune--india-python-")
        assert disposition.endswith(".csv")
        lines = response.text.strip().splitlines()
        assert lines[0].startswith("No.,Company Name,Address")
        assert "Acme Tech Pvt Ltd" in lines[1]

    def test_export_xlsx(self, client, mock_geocoder, mock_orchestrator):
        response = client.post(
            "/api/search/export",
            params={"format": "xlsx"},
            json={"location": "Pune, India"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-disposition"].endswith(".xlsx")
        # XLSX files are zip archives
        assert response.content[:2] == b"PK"

    def test_export_unknown_format_returns_422(self, client, mock_geocoder, mock_orchestrator):
        response = client.post(
            "/api/search/export",
            params={"format": "pdf"},
            json={"location": "Pune, India"},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
