"""GitHub Pydantic schemas: normalised repository data and import payloads."""

from typing import Literal

from pydantic import BaseModel, Field


class GitHubUrlParts(BaseModel):
    owner: str
    repo: str


class GitHubRepo(BaseModel):
    """Repository metadata after flattening the GraphQL response."""

    name: str
    description: str | None = None
    url: str
    homepage_url: str | None = None
    stargazer_count: int = 0
    primary_language: str | None = None
    topics: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    open_graph_image_url: str | None = None
    readme: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class GitHubImportData(BaseModel):
    """Project fields derived from a repository, ready for ``ProjectCreate``."""

    title: str
    description: str | None
    content: str | None
    source_url: str
    live_url: str | None
    image_url: str | None
    github_owner: str
    github_repo: str
    github_stars: int
    github_language: str | None
    github_topics: list[str]
    tech_stack: list[str] | None
    source: Literal["github"] = "github"


class GitHubRepoLookup(BaseModel):
    """Request body: either ``url`` or both ``owner`` and ``repo``."""

    url: str | None = None
    owner: str | None = None
    repo: str | None = None


class GitHubRepoPreview(BaseModel):
    stars: int
    primary_language: str | None
    topics: list[str]
    languages: list[str]
    open_graph_image_url: str | None


class GitHubImportResponse(GitHubImportData):
    raw: GitHubRepoPreview
