"""Tests for health, revalidation and contact settings endpoints."""

import pytest

from alteran.web.page_cache import get_page_cache

pytestmark = pytest.mark.unit


class TestHealth:
    def test_health(self, api_client):
        response = api_client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "alteran"}

    def test_health_draining(self, api_client):
        api_client.app.state.shutting_down = True
        assert api_client.get("/api/health").status_code == 503

    def test_ready(self, api_client):
        response = api_client.get("/api/ready")
        assert response.status_code == 200
        assert response.json()["checks"] == {"database": True}

    def test_correlation_id_header(self, api_client):
        response = api_client.get("/api/health")
        assert response.headers.get("x-request-id")


class TestRevalidate:
    def test_evicts_cached_page(self, admin_client):
        get_page_cache().set("/", "<html>stale</html>")

        response = admin_client.post("/api/revalidate", json={"path": "/"})

        assert response.status_code == 200
        body = response.json()
        assert body["revalidated"] is True
        assert body["path"] == "/"
        assert isinstance(body["timestamp"], int)
        assert get_page_cache().get("/") is None

    @pytest.mark.parametrize("payload", [{}, {"path": ""}, {"path": 5}])
    def test_requires_path(self, admin_client, payload):
        response = admin_client.post("/api/revalidate", json=payload)
        assert response.status_code == 400
        assert "path" in response.json()["error"]


class TestContactSettings:
    def test_defaults_empty(self, admin_client):
        response = admin_client.get("/api/settings")
        assert response.json() == {"contact_github": "", "contact_email": ""}

    def test_save_and_read_back(self, admin_client):
        response = admin_client.put(
            "/api/settings",
            json={"contact_github": " https://github.com/alteran-tech ", "contact_email": "team@alteran.tech"},
        )

        assert response.status_code == 200
        expected = {"contact_github": "https://github.com/alteran-tech", "contact_email": "team@alteran.tech"}
        assert response.json() == expected
        assert admin_client.get("/api/settings").json() == expected
