"""
Tests for /api/auth endpoints and the cookie auth dependency.

Tests cover:
- Valid token in cookie → identity returned
- Missing, expired, tampered and incomplete tokens → 401
- Logout clears the cookie with or without a session
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from backend.config import settings
from backend.main import app

COOKIE = settings.AUTH_COOKIE_NAME


def make_token(payload, secret=None, expires_in=timedelta(hours=1)):
    claims = dict(payload)
    if expires_in is not None:
        claims["exp"] = datetime.now(timezone.utc) + expires_in
    return jwt.encode(claims, secret or settings.JWT_SECRET, algorithm="HS256")


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app)


class TestAuthMe:
    """Tests for GET /api/auth/me"""

    def test_valid_cookie(self, client):
        token = make_token({"userId": "user-123", "role": "PG_OWNER"})
        client.cookies.set(COOKIE, token)

        response = client.get("/api/auth/me")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Authenticated",
            "data": {"userId": "user-123", "role": "PG_OWNER"},
        }

    def test_missing_cookie(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "No token provided"}

    def test_expired_token(self, client):
        token = make_token({"userId": "user-123", "role": "RESIDENT"}, expires_in=timedelta(minutes=-5))
        client.cookies.set(COOKIE, token)

        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["message"] == "Token expired"

    def test_wrong_signature(self, client):
        token = make_token(
            {"userId": "user-123", "role": "RESIDENT"},
            secret="some-other-secret-that-is-long-enough",
        )
        client.cookies.set(COOKIE, token)

        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_garbage_token(self, client):
        client.cookies.set(COOKIE, "not-a-jwt")

        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    @pytest.mark.parametrize("payload", [
        {"role": "PG_OWNER"},
        {"userId": "user-123"},
        {"userId": "user-123", "role": "ADMIN"},
    ])
    def test_incomplete_payload(self, client, payload):
        client.cookies.set(COOKIE, make_token(payload))

        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"


class TestLogout:
    """Tests for GET /api/auth/logout"""

    def test_logout_clears_cookie(self, client):
        client.cookies.set(COOKIE, make_token({"userId": "user-123", "role": "RESIDENT"}))

        response = client.get("/api/auth/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logged out successfully", "data": None}
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{COOKIE}=")
        assert "Max-Age=0" in set_cookie

    def test_logout_without_session(self, client):
        response = client.get("/api/auth/logout")

        assert response.status_code == 200
        assert response.json()["success"] is True


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "pg-community-backend"
        assert data["environment"] == "testing"
        assert data["version"] == app.version
