"""GitHub import API routes."""

import structlog
from fastapi import APIRouter, Depends

from alteran.core.auth import require_admin
from alteran.core.config import get_settings
from alteran.core.exceptions import ValidationError
from alteran.db.base import get_session_factory
from alteran.integrations.github import GitHubClient, GitHubRepoCache, map_repo_to_project, parse_github_url
from alteran.schemas.github import GitHubImportResponse, GitHubRepoLookup, GitHubRepoPreview, GitHubUrlParts

logger = structlog.get_logger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


def get_github_cache() -> GitHubRepoCache:
    """Dependency that provides the cached GitHub client.

    Override this dependency in tests via app.dependency_overrides.
    """
    settings = get_settings()
    return GitHubRepoCache(
        get_session_factory(),
        client=GitHubClient(settings),
        ttl_seconds=settings.github_cache_ttl,
    )


def _resolve_repo(body: GitHubRepoLookup) -> GitHubUrlParts:
    if body.url and body.url.strip():
        return parse_github_url(body.url)
    if body.owner and body.owner.strip() and body.repo and body.repo.strip():
        return GitHubUrlParts(owner=body.owner.strip(), repo=body.repo.strip())
    raise ValidationError("Request body must contain either 'url' or both 'owner' and 'repo'")


@router.post("/repo", response_model=GitHubImportResponse)
async def fetch_repo(body: GitHubRepoLookup, cache: GitHubRepoCache = Depends(get_github_cache)):
    """Fetch repository metadata and map it onto project fields.

    Raises:
        GitHubApiError: With the status of the failure class (400/401/403/404/429/502)
    """
    parts = _resolve_repo(body)
    repo = await cache.get(parts.owner, parts.repo)
    mapped = map_repo_to_project(repo, parts.owner, parts.repo)

    logger.info("github_repo_imported", owner=parts.owner, repo=parts.repo)
    return GitHubImportResponse(
        **mapped.model_dump(),
        raw=GitHubRepoPreview(
            stars=repo.stargazer_count,
            primary_language=repo.primary_language,
            topics=repo.topics,
            languages=repo.languages,
            open_graph_image_url=repo.open_graph_image_url,
        ),
    )


@router.post("/repo/invalidate")
async def invalidate_repo(body: GitHubRepoLookup, cache: GitHubRepoCache = Depends(get_github_cache)):
    """Drop the cached snapshot so the next lookup hits the API."""
    parts = _resolve_repo(body)
    await cache.invalidate(parts.owner, parts.repo)
    return {"success": True, "owner": parts.owner, "repo": parts.repo}
