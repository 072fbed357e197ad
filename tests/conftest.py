"""Pytest configuration and fixtures for test suite."""

import os
import sys
from pathlib import Path

import pytest

# Set test environment BEFORE any application imports
os.environ["APP_ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-jwt-secret-0123456789abcdef0123456789abcdef"
os.environ["AUTH_BCRYPT_ROUNDS"] = "4"
os.environ["DB_DRIVER"] = "sqlite+aiosqlite"

src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


TEST_PASSWORD = "secret123"


def reset_cached_state():
    """Drop cached settings and the global engine so env changes take effect."""
    from config.database import get_database_settings
    from config.settings import get_auth_settings, get_settings
    import database.async_engine as engine_module

    get_settings.cache_clear()
    get_auth_settings.cache_clear()
    get_database_settings.cache_clear()
    engine_module._async_engine = None
    engine_module._async_session_factory = None


@pytest.fixture(autouse=True)
def isolated_database(tmp_path, monkeypatch):
    """Each test gets its own SQLite file."""
    db_path = tmp_path / "tasks.db"
    monkeypatch.setenv("DB_SQLITE_PATH", str(db_path))
    reset_cached_state()
    yield db_path
    reset_cached_state()


@pytest.fixture
def app():
    from web.app import create_app
    return create_app()


@pytest.fixture
def client(app):
    """TestClient with startup (table creation) and shutdown run."""
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(client):
    """
    Register and log in a user; returns (headers, user).

    Usage:
        headers, user = make_user("bob")
        client.get("/tasks", headers=headers)
    """
    def _make(username: str = "alice", email: str = None, password: str = TEST_PASSWORD):
        email = email or f"{username}@example.com"
        response = client.post(
            "/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text

        response = client.post("/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        body = response.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _make


@pytest.fixture
def auth_headers(make_user):
    headers, _ = make_user("alice")
    return headers
