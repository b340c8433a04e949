"""Tests for the project CRUD endpoints."""

import pytest

pytestmark = pytest.mark.unit


def _create(client, **fields) -> dict:
    response = client.post("/api/projects", json=fields)
    assert response.status_code == 201, response.json()
    return response.json()


class TestCreate:
    def test_create_returns_project(self, admin_client):
        project = _create(
            admin_client,
            title="Neural Dashboard",
            description="Realtime ML metrics",
            tech_stack=["React", "Rust"],
            featured=True,
        )
        assert project["slug"] == "neural-dashboard"
        assert project["tech_stack"] == ["React", "Rust"]
        assert project["github_topics"] == []
        assert project["featured"] is True
        assert project["status"] == "draft"
        assert project["source"] == "manual"
        assert project["created_at"]

    def test_duplicate_titles_get_unique_slugs(self, admin_client):
        assert _create(admin_client, title="Shelf")["slug"] == "shelf"
        assert _create(admin_client, title="Shelf")["slug"] == "shelf-1"

    def test_missing_title_rejected(self, admin_client):
        response = admin_client.post("/api/projects", json={"description": "no title"})
        assert response.status_code == 400
        assert response.json()["error"] == "Title is required"

    def test_invalid_status_rejected(self, admin_client):
        response = admin_client.post("/api/projects", json={"title": "X", "status": "archived"})
        assert response.status_code == 400


class TestRead:
    def test_public_list_shows_only_published_featured_first(self, admin_client):
        _create(admin_client, title="Draft")
        _create(admin_client, title="Plain", status="published")
        _create(admin_client, title="Star", status="published", featured=True)

        titles = [p["title"] for p in admin_client.get("/api/projects").json()]

        assert titles == ["Star", "Plain"]

    def test_admin_list_filters(self, admin_client):
        _create(admin_client, title="Draft")
        _create(admin_client, title="Plain", status="published")
        _create(admin_client, title="Star", status="published", featured=True)

        def titles(**params):
            return [p["title"] for p in admin_client.get("/api/projects/all", params=params).json()]

        assert titles() == ["Star", "Plain", "Draft"]
        assert titles(status="draft") == ["Draft"]
        assert titles(featured="true") == ["Star"]
        assert titles(status="published", featured="false") == ["Plain"]

    def test_get_by_id(self, admin_client):
        project = _create(admin_client, title="Codex CLI")
        response = admin_client.get(f"/api/projects/{project['id']}")
        assert response.status_code == 200
        assert response.json()["slug"] == "codex-cli"

    def test_get_missing(self, api_client):
        response = api_client.get("/api/projects/999")
        assert response.status_code == 404
        assert response.json()["error"] == "Project not found"


class TestMutations:
    def test_partial_update(self, admin_client):
        project = _create(admin_client, title="Gateway", description="Old", category="api")

        response = admin_client.put(f"/api/projects/{project['id']}", json={"description": "New"})

        assert response.status_code == 200
        body = response.json()
        assert body["description"] == "New"
        assert body["category"] == "api"
        assert body["slug"] == "gateway"

    def test_title_update_changes_slug(self, admin_client):
        project = _create(admin_client, title="Gateway")
        body = admin_client.put(f"/api/projects/{project['id']}", json={"title": "Vector Gateway"}).json()
        assert body["slug"] == "vector-gateway"

    def test_update_missing(self, admin_client):
        assert admin_client.put("/api/projects/999", json={"title": "x"}).status_code == 404

    def test_toggle(self, admin_client):
        project = _create(admin_client, title="Toggle")
        body = admin_client.post(f"/api/projects/{project['id']}/toggle").json()
        assert body["status"] == "published"

    def test_delete(self, admin_client):
        project = _create(admin_client, title="Doomed")

        response = admin_client.delete(f"/api/projects/{project['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert admin_client.get(f"/api/projects/{project['id']}").status_code == 404
