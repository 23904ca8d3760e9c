"""Pytest fixtures for company finder tests.

This module provides shared fixtures for testing the FastAPI application,
including the test client, fast settings and fake source adapters.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.db.base import Base
from app.main import app
from app.models import Company, Contact, SearchQuery


class FakeAdapter:
    """Adapter double returning canned entities or raising."""

    def __init__(self, label: str, entities=None, error: Exception | None = None):
        self.label = label
        self.entities = list(entities or [])
        self.error = error
        self.queries: list[SearchQuery] = []

    async def search(self, query: SearchQuery) -> list[Company]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.entities)


@pytest.fixture
def fake_adapter():
    """The FakeAdapter class, for building adapter lists in tests."""
    return FakeAdapter


@pytest.fixture
def client():
    """Create a test client for the FastAPI application.

    Returns:
        TestClient: A test client instance for making requests to the API.
    """
    return TestClient(app)


@pytest.fixture
def settings():
    """Settings with no inter-request delay so tests run fast."""
    return Settings(adapter_delay_seconds=0.0)


@pytest.fixture
def db_session_factory():
    """Session factory bound to a fresh in-memory SQLite database."""
    import app.db.models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db_session(db_session_factory):
    session = db_session_factory()
    yield session
    session.close()


@pytest.fixture
def sample_companies():
    """A small pool with one duplicate pair.

    Returns:
        list[Company]: Acme twice (different contact fields) and Zephyr once.
    """
    return [
        Company(name="Acme Tech Pvt Ltd", contact=Contact(phone="9876543210"), source="DuckDuckGo"),
        Company(name="acme tech pvt. ltd.", contact=Contact(website="https://acme.in"), source="JustDial"),
        Company(name="Zephyr Labs", source="DuckDuckGo"),
    ]


@pytest.fixture
def pune_query():
    return SearchQuery(location_text="Pune, India", skill_tags=("python", "web development"))
