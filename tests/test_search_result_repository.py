"""Tests for search history persistence."""

from datetime import datetime, timedelta
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from app.db.models.search_result import SearchResultORM
from app.models import Company, Contact, SearchQuery, SearchRunResult
from app.repositories.search_result_repository import (
    SearchResultRepository,
    save_search_in_background,
)


def _result(*names: str) -> SearchRunResult:
    return SearchRunResult(
        entities=[Company(name=name, contact=Contact(phone="9876543210")) for name in names],
        region="india",
    )


class TestSearchResultRepository:
    """Test saving, loading and deleting stored searches."""

    def test_save_and_get_round_trip(self, db_session, pune_query):
        repo = SearchResultRepository(db_session)

        record = repo.save(pune_query, _result("Zephyr Labs", "Orbit Robotics"))
        loaded = repo.get(record.id)

        assert loaded is not None
        assert loaded.query == pune_query
        assert loaded.total_results == 2
        assert [c.name for c in loaded.entities] == ["Zephyr Labs", "Orbit Robotics"]
        assert loaded.entities[0].contact.phone == "9876543210"

    def test_load_newest_first(self, db_session):
        repo = SearchResultRepository(db_session)
        older = repo.save(SearchQuery(location_text="Jaipur"), _result("Zephyr Labs"))
        newer = repo.save(SearchQuery(location_text="Pune"), _result("Orbit Robotics"))

        row = db_session.get(SearchResultORM, older.id)
        row.created_at = datetime(2024, 1, 1)
        db_session.get(SearchResultORM, newer.id).created_at = datetime(2024, 6, 1)
        db_session.commit()

        assert [r.id for r in repo.load()] == [newer.id, older.id]
        assert [r.id for r in repo.load(limit=1)] == [newer.id]

    def test_load_filters_by_location(self, db_session):
        repo = SearchResultRepository(db_session)
        repo.save(SearchQuery(location_text="Jaipur, Rajasthan"), _result("Zephyr Labs"))
        repo.save(SearchQuery(location_text="Pune"), _result("Orbit Robotics"))

        records = repo.load(location="jaipur")

        assert [r.query.location_text for r in records] == ["Jaipur, Rajasthan"]

    def test_delete(self, db_session, pune_query):
        repo = SearchResultRepository(db_session)
        record = repo.save(pune_query, _result("Zephyr Labs"))

        assert repo.delete(record.id) is True
        assert repo.get(record.id) is None
        assert repo.delete(record.id) is False

    def test_get_missing(self, db_session):
        assert SearchResultRepository(db_session).get("missing") is None


class TestSaveSearchInBackground:
    """Test the background persistence task."""

    def test_saves_with_own_session(self, db_session_factory, pune_query):
        save_search_in_background(db_session_factory, pune_query, _result("Zephyr Labs"))

        session = db_session_factory()
        try:
            records = SearchResultRepository(session).load()
        finally:
            session.close()
        assert len(records) == 1
        assert records[0].query.location_text == "Pune, India"

    def test_database_error_is_logged_not_raised(self, pune_query, caplog):
        session = MagicMock()
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))

        save_search_in_background(lambda: session, pune_query, _result("Zephyr Labs"))

        session.rollback.assert_called_once()
        session.close.assert_called_once()
        assert "Failed to save search" in caplog.text
