"""Project Pydantic schemas: API contracts for the portfolio CRUD endpoints."""

from typing import Literal

from pydantic import BaseModel, Field

ProjectStatus = Literal["draft", "published"]
ProjectSource = Literal["manual", "github", "generated"]


class ProjectFields(BaseModel):
    """Editable project fields shared by create and update payloads."""

    description: str | None = None
    content: str | None = None
    image_url: str | None = None
    live_url: str | None = None
    source_url: str | None = None
    github_owner: str | None = None
    github_repo: str | None = None
    github_stars: int | None = None
    github_language: str | None = None
    github_topics: list[str] | None = None
    tech_stack: list[str] | None = None
    category: str | None = None


class ProjectCreate(ProjectFields):
    title: str = ""
    featured: bool = False
    sort_order: int = 0
    status: ProjectStatus = "draft"
    source: ProjectSource = "manual"


class ProjectUpdate(ProjectFields):
    """Partial update: only fields present in the request body are applied."""

    title: str | None = None
    featured: bool | None = None
    sort_order: int | None = None
    status: ProjectStatus | None = None
    source: ProjectSource | None = None


class ProjectResponse(BaseModel):
    id: int
    slug: str
    title: str
    description: str | None
    content: str | None
    image_url: str | None
    live_url: str | None
    source_url: str | None
    github_owner: str | None
    github_repo: str | None
    github_stars: int | None
    github_language: str | None
    github_topics: list[str] = Field(default_factory=list)
    tech_stack: list[str] = Field(default_factory=list)
    category: str | None
    featured: bool
    sort_order: int
    status: str
    source: str
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, project) -> "ProjectResponse":
        return cls(
            id=project.id,
            slug=project.slug,
            title=project.title,
            description=project.description,
            content=project.content,
            image_url=project.image_url,
            live_url=project.live_url,
            source_url=project.source_url,
            github_owner=project.github_owner,
            github_repo=project.github_repo,
            github_stars=project.github_stars,
            github_language=project.github_language,
            github_topics=project.github_topics_list,
            tech_stack=project.tech_stack_list,
            category=project.category,
            featured=bool(project.featured),
            sort_order=project.sort_order or 0,
            status=project.status,
            source=project.source,
            created_at=project.created_at.isoformat(),
            updated_at=project.updated_at.isoformat(),
        )


class ProjectStats(BaseModel):
    total: int
    published: int
    draft: int
    featured: int
