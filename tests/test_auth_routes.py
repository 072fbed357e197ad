"""Tests for /register, /login, /profile and the bearer-token gate."""

from datetime import timedelta
from uuid import uuid4

import pytest

from middleware.correlation import CORRELATION_ID_HEADER
from security.jwt import create_access_token, decode_access_token

from conftest import TEST_PASSWORD


def _register(client, username="alice", email="alice@example.com", password=TEST_PASSWORD):
    return client.post(
        "/register",
        json={"username": username, "email": email, "password": password},
    )


class TestRegister:

    def test_register_success(self, client):
        response = _register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User created successfully"
        assert body["user"]["username"] == "alice"
        assert body["user"]["email"] == "alice@example.com"
        assert "password" not in str(body)

    def test_email_is_normalized(self, client):
        response = _register(client, email="  Alice@Example.COM ")
        assert response.json()["user"]["email"] == "alice@example.com"

    def test_duplicate_email(self, client):
        _register(client)
        response = _register(client, username="alice2", email="ALICE@example.com")

        assert response.status_code == 400
        assert response.json()["message"] == "User already exists"
        assert response.json()["code"] == "RESOURCE_ALREADY_EXISTS"

    @pytest.mark.parametrize("payload", [
        {"username": "al", "email": "al@example.com", "password": TEST_PASSWORD},
        {"username": "alice", "email": "not-an-email", "password": TEST_PASSWORD},
        {"username": "alice", "email": "alice@example.com", "password": "12345"},
        {"email": "alice@example.com", "password": TEST_PASSWORD},
        {"username": "alice", "password": TEST_PASSWORD},
    ])
    def test_validation_errors_are_400(self, client, payload):
        response = client.post("/register", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] is True
        assert body["code"] == "VALIDATION_ERROR"
        assert body["field_errors"]


class TestLogin:

    def test_login_success(self, client):
        registered = _register(client).json()["user"]

        response = client.post("/login", json={"email": "alice@example.com", "password": TEST_PASSWORD})

        assert response.status_code == 200
        body = response.json()
        assert body["user"] == registered
        assert body["token_type"] == "Bearer"
        assert body["expires_in"] == 3600
        assert decode_access_token(body["token"])["sub"] == registered["id"]

    def test_login_email_case_insensitive(self, client):
        _register(client)
        response = client.post("/login", json={"email": "ALICE@EXAMPLE.COM", "password": TEST_PASSWORD})
        assert response.status_code == 200

    def test_wrong_password(self, client):
        _register(client)
        response = client.post("/login", json={"email": "alice@example.com", "password": "wrong-pass"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid credentials"

    def test_unknown_email_indistinguishable_from_wrong_password(self, client):
        _register(client)
        unknown = client.post("/login", json={"email": "nobody@example.com", "password": TEST_PASSWORD})
        wrong = client.post("/login", json={"email": "alice@example.com", "password": "wrong-pass"})

        assert unknown.status_code == wrong.status_code == 400
        assert unknown.json()["message"] == wrong.json()["message"]
        assert unknown.json()["code"] == wrong.json()["code"] == "AUTH_INVALID_CREDENTIALS"

    def test_subject_resolves_to_registered_user(self, client):
        _register(client, username="carol", email="carol@example.com")
        token = client.post(
            "/login", json={"email": "carol@example.com", "password": TEST_PASSWORD}
        ).json()["token"]

        profile = client.get("/profile", headers={"Authorization": f"Bearer {token}"})

        assert profile.status_code == 200
        assert profile.json() == {"username": "carol", "email": "carol@example.com"}


class TestAuthGate:

    def test_missing_header_is_401(self, client):
        response = client.get("/profile")

        assert response.status_code == 401
        assert response.json()["message"] == "Access Denied"
        assert response.json()["code"] == "AUTH_REQUIRED"

    def test_garbage_token_is_400(self, client):
        response = client.get("/profile", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid Token"

    @pytest.mark.parametrize("header", ["garbage", "Basic abc", "Bearer a b"])
    def test_malformed_header_is_400(self, client, header):
        response = client.get("/tasks", headers={"Authorization": header})
        assert response.status_code == 400
        assert response.json()["code"] == "AUTH_INVALID_TOKEN"

    def test_expired_token_is_400(self, client, make_user):
        _, user = make_user()
        token = create_access_token(user["id"], expires_delta=timedelta(seconds=-10))

        response = client.get("/tasks", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 400
        assert response.json()["code"] == "AUTH_TOKEN_EXPIRED"

    def test_gate_trusts_subject_without_lookup(self, client):
        """A token for a user with no record still passes the gate until it expires."""
        headers = {"Authorization": f"Bearer {create_access_token(str(uuid4()))}"}

        assert client.get("/tasks", headers=headers).json() == []
        profile = client.get("/profile", headers=headers)
        assert profile.status_code == 404
        assert profile.json()["message"] == "User not found"

    def test_correlation_header_on_error(self, client):
        response = client.get("/profile", headers={CORRELATION_ID_HEADER: "trace-abc"})

        assert response.headers[CORRELATION_ID_HEADER] == "trace-abc"
        assert response.json()["request_id"] == "trace-abc"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"] == "connected"
