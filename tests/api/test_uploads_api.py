"""Tests for image upload and serving."""

from pathlib import Path

import pytest

from alteran.core.config import get_settings

pytestmark = pytest.mark.unit

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _upload(client, name="shot.png", content=PNG_BYTES, content_type="image/png"):
    return client.post("/api/upload", files={"file": (name, content, content_type)})


class TestUpload:
    def test_stores_image_and_returns_url(self, admin_client, test_settings):
        response = _upload(admin_client)

        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith("/api/uploads/")
        assert url.endswith(".png")
        stored = Path(test_settings.upload_dir) / url.rsplit("/", 1)[1]
        assert stored.read_bytes() == PNG_BYTES

    def test_rejects_non_image_type(self, admin_client):
        response = _upload(admin_client, name="notes.txt", content=b"hello", content_type="text/plain")
        assert response.status_code == 400
        assert "Only images" in response.json()["error"]

    def test_rejects_mismatched_extension(self, admin_client):
        response = _upload(admin_client, name="payload.html", content_type="image/png")
        assert response.status_code == 400

    def test_missing_file(self, admin_client):
        response = admin_client.post("/api/upload", data={"other": "x"})
        assert response.status_code == 400
        assert response.json()["error"] == "No file provided"

    def test_rejects_oversized_file(self, admin_client, monkeypatch):
        monkeypatch.setenv("UPLOAD_MAX_BYTES", "16")
        get_settings.cache_clear()

        response = _upload(admin_client)

        assert response.status_code == 400
        assert response.json()["error"].startswith("File too large")


class TestServe:
    def test_serves_uploaded_file(self, admin_client):
        url = _upload(admin_client).json()["url"]

        response = admin_client.get(url)

        assert response.status_code == 200
        assert response.content == PNG_BYTES
        assert response.headers["content-type"] == "image/png"
        assert response.headers["cache-control"] == "public, max-age=31536000, immutable"

    def test_serving_needs_no_session(self, admin_client, api_client):
        url = _upload(admin_client).json()["url"]
        api_client.cookies.clear()
        assert api_client.get(url).status_code == 200

    def test_missing_file(self, api_client):
        assert api_client.get("/api/uploads/1700000000000.png").status_code == 404

    @pytest.mark.parametrize("filename", ["..secret.png", "a..b.png", "%5C..%5Cconfig.png"])
    def test_rejects_traversal(self, api_client, test_settings, filename):
        Path(test_settings.upload_dir).mkdir(parents=True, exist_ok=True)
        assert api_client.get(f"/api/uploads/{filename}").status_code == 404
