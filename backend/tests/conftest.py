"""
Shared fixtures: an in-memory SQLite catalog seeded from
scripts/sample_listings.json and a TestClient wired to it.
"""

import json
import os
from datetime import date

# Point settings at an in-memory database before the app is imported
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from concierge.core.rate_limiting import limiter
from concierge.db.database import get_db
from concierge.db.models import Base
from concierge.db.seed import seed_listings, seed_profiles
from concierge.main import app
from concierge.services.catalog import CandidateListing

SAMPLE_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "scripts",
    "sample_listings.json",
)

TODAY = date(2026, 1, 1)


@pytest.fixture
def sample_data():
    with open(SAMPLE_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def db_session(sample_data):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    seed_listings(session, sample_data["listings"])
    seed_profiles(session, sample_data["profiles"])
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    limiter.reset()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class FakeCatalog:
    """Catalog collaborator that answers from a callable and records every query."""

    def __init__(self, responder):
        self.responder = responder
        self.calls = []

    def query(self, filters):
        self.calls.append(filters)
        result = self.responder(filters)
        if isinstance(result, Exception):
            raise result
        return list(result)


class FakeProfiles:
    def __init__(self, interests_by_user):
        self.interests_by_user = interests_by_user

    def get_interests(self, user_id):
        return self.interests_by_user.get(user_id)


def make_listing(listing_id, **overrides) -> CandidateListing:
    fields = {
        "id": listing_id,
        "title": f"Listing {listing_id}",
        "slug": f"listing-{listing_id}",
        "description": "",
        "categories": [],
        "location": "",
        "guest_capacity": 4,
        "boost": 0.0,
    }
    fields.update(overrides)
    return CandidateListing(**fields)
