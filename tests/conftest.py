"""
Shared fixtures: a temporary SQLite database per test and a TestClient
running the full application lifespan against it.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shared.config import Settings


@pytest.fixture()
def settings(tmp_path) -> Settings:
    db_file = tmp_path / "schools.db"
    return Settings(database_url_override=f"sqlite+aiosqlite:///{db_file}")


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def add_school(client):
    """Insert a school through the API and return its id."""

    def _add(name="Test School", address="1 Main St", latitude=0.0, longitude=0.0):
        resp = client.post(
            "/addSchool",
            json={"name": name, "address": address, "latitude": latitude, "longitude": longitude},
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["schoolId"]

    return _add
