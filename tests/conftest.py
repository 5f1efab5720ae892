"""
pytest configuration and fixtures.

Every test gets its own application bound to a fresh in-memory SQLite
database, with the tables created at startup.
"""
import pytest
from fastapi.testclient import TestClient

from flashcards_api.core.config import Settings
from flashcards_api.main import create_app


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite+aiosqlite://",
        DATABASE_SSL=False,
        CREATE_TABLES=True,
    )


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def collection_id(client) -> int:
    """Id of a freshly created "Biology" collection."""
    response = client.post("/collections", json={"name": "Biology"})
    return response.json()["data"]["createdCollection"][0]["id"]
