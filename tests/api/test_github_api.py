"""Tests for the GitHub import endpoints."""

import pytest

from alteran.api.routes.github import get_github_cache
from alteran.core.exceptions import GitHubApiError
from alteran.schemas.github import GitHubRepo

pytestmark = pytest.mark.unit


class FakeRepoCache:
    def __init__(self, repo: GitHubRepo | None = None, error: GitHubApiError | None = None):
        self.repo = repo
        self.error = error
        self.lookups: list[tuple[str, str]] = []
        self.invalidated: list[tuple[str, str]] = []

    async def get(self, owner: str, repo: str) -> GitHubRepo:
        self.lookups.append((owner, repo))
        if self.error is not None:
            raise self.error
        return self.repo

    async def invalidate(self, owner: str, repo: str) -> None:
        self.invalidated.append((owner, repo))


SAMPLE_REPO = GitHubRepo(
    name="hyperframe",
    description="HTTP/2 framing layer",
    url="https://github.com/alteran-tech/hyperframe",
    homepage_url="",
    stargazer_count=42,
    primary_language="Python",
    topics=["http2", "protocol"],
    languages=["Python", "Cython"],
    open_graph_image_url="https://opengraph.githubassets.com/1/alteran-tech/hyperframe",
    readme="# hyperframe",
)


@pytest.fixture
def fake_cache(api_client):
    cache = FakeRepoCache(repo=SAMPLE_REPO)
    api_client.app.dependency_overrides[get_github_cache] = lambda: cache
    yield cache
    api_client.app.dependency_overrides.clear()


class TestFetchRepo:
    def test_import_by_url(self, admin_client, fake_cache):
        response = admin_client.post(
            "/api/github/repo", json={"url": "https://github.com/alteran-tech/hyperframe.git"}
        )

        assert response.status_code == 200
        body = response.json()
        assert fake_cache.lookups == [("alteran-tech", "hyperframe")]
        assert body["title"] == "hyperframe"
        assert body["source"] == "github"
        assert body["live_url"] is None
        assert body["github_stars"] == 42
        assert body["github_topics"] == ["http2", "protocol"]
        assert body["tech_stack"] == ["Python", "Cython"]
        assert body["content"] == "# hyperframe"
        assert body["raw"]["stars"] == 42
        assert body["raw"]["languages"] == ["Python", "Cython"]

    def test_import_by_owner_and_repo(self, admin_client, fake_cache):
        response = admin_client.post("/api/github/repo", json={"owner": " alteran-tech ", "repo": "hyperframe"})

        assert response.status_code == 200
        assert fake_cache.lookups == [("alteran-tech", "hyperframe")]

    def test_missing_target(self, admin_client, fake_cache):
        response = admin_client.post("/api/github/repo", json={"owner": "alteran-tech"})

        assert response.status_code == 400
        assert "owner" in response.json()["error"]
        assert fake_cache.lookups == []

    def test_non_github_url(self, admin_client, fake_cache):
        response = admin_client.post("/api/github/repo", json={"url": "https://gitlab.com/a/b"})
        assert response.status_code == 400

    @pytest.mark.parametrize("status", [401, 403, 404, 429, 502])
    def test_upstream_errors_keep_their_status(self, admin_client, fake_cache, status):
        fake_cache.error = GitHubApiError("upstream said no", status)

        response = admin_client.post("/api/github/repo", json={"owner": "a", "repo": "b"})

        assert response.status_code == status
        assert response.json()["error"] == "upstream said no"

    def test_invalidate(self, admin_client, fake_cache):
        response = admin_client.post("/api/github/repo/invalidate", json={"url": "https://github.com/a/b"})

        assert response.status_code == 200
        assert fake_cache.invalidated == [("a", "b")]
