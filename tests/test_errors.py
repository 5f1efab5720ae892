"""
Tests for how database failures reach the client.
"""
import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert
from sqlalchemy.exc import DBAPIError, OperationalError, ProgrammingError, SQLAlchemyError

from flashcards_api.core.database import get_db
from flashcards_api.core.errors import GENERIC_ERROR_MESSAGE, is_connection_error
from flashcards_api.models.user import User


class FailingDatabase:
    """Stands in for the database and raises on every statement."""

    def __init__(self, exc):
        self.exc = exc

    async def execute(self, statement):
        raise self.exc


@pytest.fixture
def fail_with(app, client):
    def install(exc):
        app.dependency_overrides[get_db] = lambda: FailingDatabase(exc)
    yield install
    app.dependency_overrides.clear()


def test_lost_connection_is_503(client, fail_with):
    fail_with(OperationalError("select 1", {}, Exception("server closed the connection")))

    response = client.get("/collections")

    assert response.status_code == 503
    assert response.json() == {"status": "error", "message": "Database unavailable"}


def test_invalidated_connection_is_503(client, fail_with):
    fail_with(DBAPIError("select 1", {}, Exception("reset"), connection_invalidated=True))

    assert client.get("/collections/1").status_code == 503


def test_other_database_errors_are_generic_500(client, fail_with):
    fail_with(ProgrammingError("select", {}, Exception("syntax error")))

    response = client.post("/collections", json={"name": "Biology"})

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": GENERIC_ERROR_MESSAGE}


def test_database_errors_are_logged(client, fail_with, caplog):
    fail_with(SQLAlchemyError("boom"))

    with caplog.at_level("ERROR", logger="flashcards_api.core.errors"):
        client.delete("/collections/1")

    assert "Database error on DELETE /collections/1" in caplog.text


def test_login_does_not_hide_database_failure(client, fail_with):
    fail_with(OperationalError("select", {}, Exception("timeout")))

    response = client.post("/login", json={"username": "alice", "password": "s3cret"})

    assert response.status_code == 503

def test_refused_connection_is_503(client, fail_with):
    fail_with(ConnectionRefusedError(111, "Connect call failed"))

    response = client.get("/collections")

    assert response.status_code == 503
    assert response.json() == {"status": "error", "message": "Database unavailable"}


def test_connect_timeout_is_503(client, fail_with):
    fail_with(asyncio.TimeoutError())

    assert client.post("/collections", json={"name": "Biology"}).status_code == 503


def test_refused_connection_is_logged(client, fail_with, caplog):
    fail_with(ConnectionRefusedError(111, "Connect call failed"))

    with caplog.at_level("ERROR", logger="flashcards_api.core.errors"):
        client.get("/collections/1/flashcards")

    assert "Database unreachable on GET /collections/1/flashcards" in caplog.text


class TestUnexpectedErrors:
    """Errors outside the database layer still answer with the JSON body."""

    @pytest.fixture
    def lenient_client(self, app):
        with TestClient(app, raise_server_exceptions=False) as client:
            yield client

    def test_malformed_stored_digest(self, app, lenient_client, caplog):
        lenient_client.portal.call(
            app.state.db.execute,
            insert(User).values(username="alice", password="plain").returning(User),
        )

        with caplog.at_level("ERROR", logger="flashcards_api.core.errors"):
            response = lenient_client.post("/login", json={"username": "alice", "password": "s3cret"})

        assert response.status_code == 500
        assert response.json() == {"status": "error", "message": GENERIC_ERROR_MESSAGE}
        assert "Unhandled error on POST /login" in caplog.text

    def test_unexpected_exception_from_database(self, app, lenient_client):
        app.dependency_overrides[get_db] = lambda: FailingDatabase(RuntimeError("driver bug"))
        try:
            response = lenient_client.get("/collections")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        assert response.json()["message"] == GENERIC_ERROR_MESSAGE


class TestIsConnectionError:
    def test_operational_error(self):
        assert is_connection_error(OperationalError("select", {}, Exception()))

    def test_programming_error(self):
        assert not is_connection_error(ProgrammingError("select", {}, Exception()))

    def test_plain_sqlalchemy_error(self):
        assert not is_connection_error(SQLAlchemyError("boom"))
