"""Integration tests for the account and session endpoints via TestClient."""

import pytest
from app import create_app
from fastapi.testclient import TestClient


@pytest.fixture()
def client():
    return TestClient(create_app())


def _register(client, email="jane@example.com", password="correct horse battery"):
    response = client.post(
        "/users",
        json={"name": "Jane Doe", "email": email, "password": password},
    )
    assert response.status_code == 201
    return response.json()["user_id"]


def _login(client, email="jane@example.com", password="correct horse battery"):
    return client.post("/auth/login", json={"email": email, "password": password})


class TestRegistrationEndpoint:
    def test_register_returns_id(self, client):
        assert _register(client)

    def test_duplicate_email(self, client):
        _register(client)
        response = client.post(
            "/users",
            json={"name": "Other", "email": "JANE@example.com", "password": "another password"},
        )
        assert response.status_code == 400

    def test_short_password_rejected(self, client):
        response = client.post("/users", json={"name": "Jane", "email": "jane@example.com", "password": "short"})
        assert response.status_code == 422

    def test_password_limit_counts_utf8_bytes(self, client):
        # 40 characters, 80 bytes
        password = "é" * 40
        response = client.post("/users", json={"name": "Jane", "email": "jane@example.com", "password": password})
        assert response.status_code == 422

    def test_password_at_the_byte_limit_is_accepted(self, client):
        assert _register(client, password="é" * 36)
        assert _login(client, password="é" * 36).status_code == 200

    def test_login_with_oversized_password_is_rejected(self, client):
        assert _login(client, password="é" * 40).status_code == 422

    def test_public_registration_is_always_customer(self, client):
        _register(client)
        token = _login(client).json()["token"]
        me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["role"] == "customer"


class TestLoginEndpoints:
    def test_login_returns_token_and_profile(self, client):
        user_id = _register(client)

        response = _login(client)

        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["user"]["id"] == user_id
        assert "password_hash" not in body["user"]

    def test_bad_credentials(self, client):
        _register(client)
        response = _login(client, password="wrong password")
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}

    def test_me_requires_a_token(self, client):
        response = client.get("/users/me")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_malformed_authorization_header(self, client):
        response = client.get("/users/me", headers={"Authorization": "Token abc"})
        assert response.status_code == 401

    def test_logout_revokes_the_token(self, client):
        _register(client)
        token = _login(client).json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        assert client.post("/auth/logout", headers=headers).status_code == 200
        assert client.get("/users/me", headers=headers).status_code == 401
