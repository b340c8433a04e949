"""GitHub Integration: look up public repositories for project import.

This module provides:
- URL parsing for the forms admins paste into the import box
- A GraphQL client that maps HTTP and GraphQL failures to ``GitHubApiError``
- A cache-aside wrapper backed by the ``github_cache`` table (1 hour TTL)
- Mapping from repository metadata onto project fields
"""

import json
import re
import time
from urllib.parse import urlparse

import httpx
import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from alteran.core.config import Settings, get_settings
from alteran.core.exceptions import GitHubApiError
from alteran.db.models.github_cache import GitHubCacheEntry
from alteran.schemas.github import GitHubImportData, GitHubRepo, GitHubUrlParts

logger = structlog.get_logger(__name__)

REPO_QUERY = """
query GetRepository($owner: String!, $repo: String!) {
  repository(owner: $owner, name: $repo) {
    name
    description
    url
    homepageUrl
    stargazerCount
    primaryLanguage {
      name
    }
    repositoryTopics(first: 20) {
      nodes {
        topic {
          name
        }
      }
    }
    openGraphImageUrl
    languages(first: 10, orderBy: { field: SIZE, direction: DESC }) {
      nodes {
        name
        color
      }
    }
    object(expression: "HEAD:README.md") {
      ... on Blob {
        text
      }
    }
    createdAt
    updatedAt
  }
}
"""

_GITHUB_HOSTS = {"github.com", "www.github.com"}
_SHORTHAND = re.compile(r"^([A-Za-z0-9-]+)/([A-Za-z0-9._-]+)$")


def parse_github_url(url: str) -> GitHubUrlParts:
    """Parse a GitHub reference into owner and repo.

    Supports:
    - owner/repo
    - github.com/owner/repo
    - https://github.com/owner/repo
    - https://github.com/owner/repo/tree/main/... (extra path ignored)

    A trailing ``.git`` is dropped. Anything else raises ``GitHubApiError(400)``.
    """
    text = (url or "").strip()

    shorthand = _SHORTHAND.match(text)
    if shorthand:
        repo = _strip_git_suffix(shorthand.group(2))
        if not repo:
            raise GitHubApiError("Invalid GitHub reference: expected owner/repo", 400)
        return GitHubUrlParts(owner=shorthand.group(1), repo=repo)

    normalised = text if re.match(r"^https?://", text, re.IGNORECASE) else f"https://{text}"
    try:
        parsed = urlparse(normalised)
        hostname = (parsed.hostname or "").lower()
    except ValueError as exc:
        raise GitHubApiError("Invalid URL format: expected https://github.com/owner/repo", 400) from exc

    if hostname not in _GITHUB_HOSTS:
        raise GitHubApiError("URL must be a github.com URL", 400)

    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) < 2:
        raise GitHubApiError("Invalid GitHub URL: expected https://github.com/owner/repo", 400)

    repo = _strip_git_suffix(parts[1])
    if not repo:
        raise GitHubApiError("Invalid GitHub URL: expected https://github.com/owner/repo", 400)
    return GitHubUrlParts(owner=parts[0], repo=repo)


def _strip_git_suffix(repo: str) -> str:
    return repo[:-4] if repo.endswith(".git") else repo


class GitHubClient:
    """Client for the GitHub GraphQL API."""

    def __init__(self, settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize GitHub client.

        Args:
            settings: Application settings (token, endpoint); defaults to get_settings()
            transport: Optional httpx transport, used by tests to fake the API
        """
        self.settings = settings or get_settings()
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.settings.app_name,
        }
        # Unauthenticated requests still work for public repos at a lower rate limit
        if self.settings.github_token:
            headers["Authorization"] = f"bearer {self.settings.github_token}"
        return headers

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        reraise=True,
        before_sleep=lambda rs: logger.warning(
            "github_request_retrying",
            attempt=rs.attempt_number,
            sleep_seconds=rs.next_action.sleep,
        ),
    )
    async def _post(self, payload: dict) -> httpx.Response:
        async with httpx.AsyncClient(transport=self.transport, timeout=15.0) as client:
            return await client.post(
                self.settings.github_graphql_url,
                headers=self._headers(),
                json=payload,
            )

    async def fetch_repo(self, owner: str, repo: str) -> GitHubRepo:
        """Fetch repository metadata, mapping every failure to ``GitHubApiError``."""
        try:
            response = await self._post({"query": REPO_QUERY, "variables": {"owner": owner, "repo": repo}})
        except httpx.HTTPError as exc:
            logger.warning("github_request_failed", owner=owner, repo=repo, error=str(exc))
            raise GitHubApiError("Could not reach the GitHub API", 502) from exc

        if response.status_code == 401:
            raise GitHubApiError("GitHub authentication failed: check GITHUB_TOKEN", 401)

        if response.status_code == 403:
            if response.headers.get("x-ratelimit-remaining") == "0":
                raise GitHubApiError("GitHub API rate limit exceeded", 429)
            raise GitHubApiError("GitHub API access forbidden", 403)

        if response.status_code >= 400:
            raise GitHubApiError(f"GitHub API returned {response.status_code}", response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise GitHubApiError("GitHub API returned a malformed response", 502) from exc

        errors = body.get("errors") or []
        if errors:
            first = errors[0]
            if first.get("type") == "NOT_FOUND":
                raise GitHubApiError(f"Repository not found: {owner}/{repo}", 404)
            raise GitHubApiError(first.get("message") or "GitHub GraphQL error", 400)

        # REST-style error envelope (e.g. "Bad credentials")
        if body.get("message"):
            raise GitHubApiError(body["message"], 401)

        repository = (body.get("data") or {}).get("repository")
        if not repository:
            raise GitHubApiError(f"Repository not found: {owner}/{repo}", 404)

        return _parse_repository(repository)


def _parse_repository(repository: dict) -> GitHubRepo:
    primary_language = repository.get("primaryLanguage") or {}
    topics = (repository.get("repositoryTopics") or {}).get("nodes") or []
    languages = (repository.get("languages") or {}).get("nodes") or []
    readme = repository.get("object") or {}

    return GitHubRepo(
        name=repository["name"],
        description=repository.get("description"),
        url=repository["url"],
        homepage_url=repository.get("homepageUrl"),
        stargazer_count=repository.get("stargazerCount") or 0,
        primary_language=primary_language.get("name"),
        topics=[node["topic"]["name"] for node in topics],
        languages=[node["name"] for node in languages],
        open_graph_image_url=repository.get("openGraphImageUrl"),
        readme=readme.get("text"),
        created_at=repository.get("createdAt"),
        updated_at=repository.get("updatedAt"),
    )


def cache_key(owner: str, repo: str) -> str:
    return f"github:{owner.lower()}/{repo.lower()}"


class GitHubRepoCache:
    """Read-through cache in front of ``GitHubClient.fetch_repo``.

    Cache failures never block a lookup: read errors fall through to the API,
    write errors are logged and the fresh data is still returned.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        client: GitHubClient | None = None,
        ttl_seconds: int = 3600,
        clock=time.time,
    ):
        self.session_factory = session_factory
        self.client = client or GitHubClient()
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    async def _read(self, key: str, now: int) -> GitHubRepo | None:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(GitHubCacheEntry.data)
                    .where(GitHubCacheEntry.cache_key == key, GitHubCacheEntry.expires_at > now)
                    .limit(1)
                )
                cached = result.scalar_one_or_none()
            if cached is not None:
                return GitHubRepo.model_validate(json.loads(cached))
        except Exception as e:
            logger.warning("github_cache_read_failed", cache_key=key, error=str(e), error_type=type(e).__name__)
        return None

    async def _write(self, key: str, data: GitHubRepo, now: int) -> None:
        try:
            async with self.session_factory() as session:
                # Stale rows are replaced, never updated in place
                await session.execute(delete(GitHubCacheEntry).where(GitHubCacheEntry.cache_key == key))
                session.add(
                    GitHubCacheEntry(
                        cache_key=key,
                        data=data.model_dump_json(),
                        expires_at=now + self.ttl_seconds,
                    )
                )
                await session.commit()
        except Exception as e:
            logger.warning("github_cache_write_failed", cache_key=key, error=str(e), error_type=type(e).__name__)

    async def get(self, owner: str, repo: str) -> GitHubRepo:
        key = cache_key(owner, repo)
        now = int(self._clock())

        cached = await self._read(key, now)
        if cached is not None:
            logger.debug("github_cache_hit", cache_key=key)
            return cached

        logger.info("github_cache_miss", cache_key=key)
        data = await self.client.fetch_repo(owner, repo)
        await self._write(key, data, now)
        return data

    async def invalidate(self, owner: str, repo: str) -> None:
        key = cache_key(owner, repo)
        async with self.session_factory() as session:
            await session.execute(delete(GitHubCacheEntry).where(GitHubCacheEntry.cache_key == key))
            await session.commit()
        logger.info("github_cache_invalidated", cache_key=key)


def map_repo_to_project(data: GitHubRepo, owner: str, repo: str) -> GitHubImportData:
    """Map repository metadata onto project-compatible fields."""
    return GitHubImportData(
        title=data.name,
        description=data.description,
        content=data.readme,
        source_url=data.url,
        live_url=data.homepage_url or None,
        image_url=data.open_graph_image_url or None,
        github_owner=owner,
        github_repo=repo,
        github_stars=data.stargazer_count,
        github_language=data.primary_language,
        github_topics=list(data.topics),
        tech_stack=list(data.languages) or None,
    )
