"""Tests for application assembly and its startup/shutdown lifespan."""

import warnings
from pathlib import Path

from fastapi.testclient import TestClient

import database.async_engine as engine_module
from web.app import create_app

from conftest import TEST_PASSWORD

SRC_ROOT = Path(__file__).resolve().parent.parent / "src"


def _exercise(client):
    client.post(
        "/register",
        json={"username": "alice", "email": "alice@example.com", "password": TEST_PASSWORD},
    )
    token = client.post(
        "/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
    ).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    task = client.post(
        "/tasks", json={"title": "Write report", "due_date": "2024-01-05"}, headers=headers
    ).json()
    client.put(f"/tasks/{task['id']}", json={"status": "completed"}, headers=headers)
    client.get("/tasks", headers=headers)
    client.get("/profile", headers=headers)
    client.delete(f"/tasks/{task['id']}", headers=headers)
    client.get("/health")
    client.get("/profile", headers={"Authorization": "Bearer garbage"})


def test_lifespan_creates_schema_and_disposes_engine():
    app = create_app()
    assert engine_module._async_engine is None

    with TestClient(app) as client:
        assert engine_module._async_engine is not None
        assert client.get("/health").json()["database"] == "connected"

    assert engine_module._async_engine is None


def test_request_flow_emits_no_deprecations_from_our_code():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        app = create_app()
        with TestClient(app) as client:
            _exercise(client)

    ours = [
        w for w in caught
        if issubclass(w.category, DeprecationWarning)
        and Path(w.filename).resolve().is_relative_to(SRC_ROOT)
    ]
    assert ours == [], [f"{w.filename}:{w.lineno} {w.message}" for w in ours]
