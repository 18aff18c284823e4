"""
Shared fixtures: a fresh SQLite file per test, the app built on it and
helpers for registering accounts and creating events through the API.
"""

import pytest
from fastapi.testclient import TestClient

from groupbook_api.app.core.config import Settings
from groupbook_api.app.core.db import Database
from groupbook_api.app.core.security import TokenService
from groupbook_api.app.main import create_app

# Keep PBKDF2 cheap in tests.
TEST_ITERATIONS = 1000


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a temporary database file"""
    return Settings(
        secret_key="test-secret",
        password_iterations=TEST_ITERATIONS,
        database_url=str(tmp_path / "test.db"),
        db_pool_size=2,
        db_pool_timeout=1.0,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Test client; entering it runs startup, which opens and migrates the database"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(settings):
    """Database opened directly, for service-level tests"""
    database = Database(settings.database_url, pool_size=2, pool_timeout=1.0)
    database.open()
    try:
        yield database
    finally:
        database.close()


@pytest.fixture
def tokens(settings):
    return TokenService(settings.secret_key, settings.access_token_expire_minutes)


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, email="owner@goodfork.com", password="secret1", display_name="The Good Fork"):
    """Register an account and return the response body"""
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "display_name": display_name},
    )
    assert response.status_code == 200
    return response.json()


def create_event(client, token, **fields):
    payload = {"event_name": "Christmas party", "event_date_time": "2030-12-19T19:30:00"}
    payload.update(fields)
    response = client.post("/api/events", json=payload, headers=auth_header(token))
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def owner(client):
    """A registered account: ``{"token": ..., "account": {...}}``"""
    body = register(client)
    assert body["return_code"] == "SUCCESS"
    return body


@pytest.fixture
def other_owner(client):
    body = register(client, email="chef@otherplace.com", display_name="Other Place")
    assert body["return_code"] == "SUCCESS"
    return body
