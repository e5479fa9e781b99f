"""
pytest configuration and fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from database import JSONFileDatabase, MemoryDatabase, get_db
from main import app


@pytest.fixture
def memory_db() -> MemoryDatabase:
    """Fresh in-memory datastore with an empty students list."""
    return MemoryDatabase()


@pytest.fixture
def file_db(tmp_path) -> JSONFileDatabase:
    """Datastore backed by a file that doesn't exist yet."""
    return JSONFileDatabase(str(tmp_path / "db.json"))


@pytest.fixture
def client(memory_db):
    """Test client whose handlers use ``memory_db``."""
    app.dependency_overrides[get_db] = lambda: memory_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_client():
    """Build a test client over any datastore."""
    def _make(database):
        app.dependency_overrides[get_db] = lambda: database
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def ada(client) -> dict:
    """A student created through the API."""
    response = client.post("/api/students", json={"name": "Ada", "email": "ada@x.com"})
    assert response.status_code == 201
    return response.json()["data"]
