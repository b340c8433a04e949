"""Tests for admin login/logout and the admin guard."""

import pytest

from alteran.core.auth import SESSION_COOKIE, verify_session_token
from alteran.core.config import get_settings
from tests.conftest import TEST_ADMIN_PASSWORD, TEST_AUTH_SECRET

pytestmark = pytest.mark.unit


class TestLogin:
    def test_valid_password_sets_session_cookie(self, api_client):
        response = api_client.post("/api/auth/login", json={"password": TEST_ADMIN_PASSWORD})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        token = response.cookies.get(SESSION_COOKIE)
        assert token and verify_session_token(token, TEST_AUTH_SECRET)
        set_cookie = response.headers["set-cookie"].lower()
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie
        assert "max-age=604800" in set_cookie

    def test_wrong_password(self, api_client):
        response = api_client.post("/api/auth/login", json={"password": "nope"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid password"
        assert "debug_id" in response.json()
        assert SESSION_COOKIE not in response.cookies

    def test_malformed_body(self, api_client):
        response = api_client.post("/api/auth/login", content=b"not json", headers={"content-type": "application/json"})
        assert response.status_code == 400

    def test_unconfigured_auth(self, api_client, monkeypatch):
        monkeypatch.setenv("ADMIN_PASSWORD", "")
        get_settings.cache_clear()

        response = api_client.post("/api/auth/login", json={"password": "anything"})

        assert response.status_code == 503
        assert response.json()["error"] == "Authentication is not configured"

    def test_logout_clears_cookie(self, admin_client):
        response = admin_client.post("/api/auth/logout")
        assert response.status_code == 200
        assert f'{SESSION_COOKIE}=""' in response.headers["set-cookie"]


class TestGuard:
    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("get", "/api/projects/all"),
            ("post", "/api/projects"),
            ("put", "/api/projects/1"),
            ("delete", "/api/projects/1"),
            ("post", "/api/projects/1/toggle"),
            ("post", "/api/github/repo"),
            ("post", "/api/generate"),
            ("post", "/api/upload"),
            ("post", "/api/revalidate"),
            ("get", "/api/settings"),
        ],
    )
    def test_admin_endpoints_reject_anonymous(self, api_client, method, path):
        response = getattr(api_client, method)(path)
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    def test_expired_cookie_rejected(self, api_client):
        from alteran.core.auth import create_session_token

        api_client.cookies.set(SESSION_COOKIE, create_session_token(TEST_AUTH_SECRET, max_age=-1))
        assert api_client.get("/api/projects/all").status_code == 401

    def test_cookie_signed_with_other_secret_rejected(self, api_client):
        from alteran.core.auth import create_session_token

        api_client.cookies.set(SESSION_COOKIE, create_session_token("someone-else"))
        assert api_client.get("/api/projects/all").status_code == 401

    def test_valid_cookie_accepted(self, admin_client):
        assert admin_client.get("/api/projects/all").status_code == 200
