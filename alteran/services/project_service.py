"""ProjectService: portfolio project CRUD with slug management.

Follows the session-factory injection pattern used across services:
- Constructor takes an ``async_sessionmaker``
- Every public method opens its own short-lived session
- Not-found is signalled with ``ProjectNotFoundError`` (mapped to 404)
- Every mutation revalidates the cached public pages for the project
"""

import json
import time
from datetime import UTC, datetime

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from alteran.core.exceptions import ProjectNotFoundError, ValidationError
from alteran.db.models.project import Project
from alteran.domain.slugs import candidate_slugs, slugify
from alteran.schemas.projects import ProjectCreate, ProjectStats, ProjectUpdate
from alteran.web.page_cache import revalidate_project_paths

logger = structlog.get_logger(__name__)

# Text fields that are trimmed and stored as NULL when blank
_TEXT_FIELDS = (
    "description",
    "content",
    "image_url",
    "live_url",
    "source_url",
    "github_owner",
    "github_repo",
    "github_language",
    "category",
)
_LIST_FIELDS = ("tech_stack", "github_topics")
_SCALAR_FIELDS = ("featured", "sort_order", "status", "source", "github_stars")


def _encode_list(values: list[str] | None) -> str | None:
    if values is None:
        return None
    return json.dumps([v.strip() for v in values if v and v.strip()], ensure_ascii=False)


def _clean_fields(data: dict) -> dict:
    """Normalise raw payload values into column values."""
    cleaned: dict = {}
    for key, value in data.items():
        if key in _TEXT_FIELDS:
            cleaned[key] = value.strip() or None if value else None
        elif key in _LIST_FIELDS:
            cleaned[key] = _encode_list(value)
        elif key in _SCALAR_FIELDS:
            if value is not None:
                cleaned[key] = value
    return cleaned


class ProjectService:
    """Create, edit, publish and list portfolio projects."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _unique_slug(self, session: AsyncSession, title: str, exclude_id: int | None = None) -> str:
        """Slugify ``title`` and append -1, -2, ... until no other project owns it."""
        base = slugify(title)
        if not base:
            return f"project-{int(time.time() * 1000)}"

        for candidate in candidate_slugs(base):
            result = await session.execute(select(Project.id).where(Project.slug == candidate).limit(1))
            owner_id = result.scalar_one_or_none()
            if owner_id is None or (exclude_id is not None and owner_id == exclude_id):
                return candidate

    async def _get_or_404(self, session: AsyncSession, project_id: int) -> Project:
        project = await session.get(Project, project_id)
        if project is None:
            raise ProjectNotFoundError()
        return project

    async def create(self, data: ProjectCreate) -> Project:
        title = (data.title or "").strip()
        if not title:
            raise ValidationError("Title is required")

        async with self.session_factory() as session:
            slug = await self._unique_slug(session, title)
            now = datetime.now(UTC)
            project = Project(
                slug=slug,
                title=title,
                created_at=now,
                updated_at=now,
                **_clean_fields(data.model_dump(exclude={"title"})),
            )
            session.add(project)
            await session.commit()
            await session.refresh(project)

        logger.info("project_created", project_id=project.id, slug=project.slug, source=project.source)
        revalidate_project_paths(project.slug)
        return project

    async def update(self, project_id: int, data: ProjectUpdate) -> Project:
        """Apply the fields present in ``data``; a new title re-derives the slug."""
        changes = data.model_dump(exclude_unset=True)

        async with self.session_factory() as session:
            project = await self._get_or_404(session, project_id)
            old_slug = project.slug

            if "title" in changes and changes["title"] is not None:
                title = changes["title"].strip()
                if not title:
                    raise ValidationError("Title cannot be empty")
                if title != project.title:
                    project.slug = await self._unique_slug(session, title, exclude_id=project_id)
                project.title = title

            for key, value in _clean_fields({k: v for k, v in changes.items() if k != "title"}).items():
                setattr(project, key, value)
            project.updated_at = datetime.now(UTC)

            await session.commit()
            await session.refresh(project)

        logger.info("project_updated", project_id=project_id, slug=project.slug, fields=sorted(changes))
        revalidate_project_paths(old_slug)
        if project.slug != old_slug:
            revalidate_project_paths(project.slug)
        return project

    async def delete(self, project_id: int) -> None:
        async with self.session_factory() as session:
            project = await self._get_or_404(session, project_id)
            slug = project.slug
            await session.delete(project)
            await session.commit()

        logger.info("project_deleted", project_id=project_id, slug=slug)
        revalidate_project_paths(slug)

    async def toggle_status(self, project_id: int) -> Project:
        """Flip a project between draft and published."""
        async with self.session_factory() as session:
            project = await self._get_or_404(session, project_id)
            project.status = "draft" if project.status == "published" else "published"
            project.updated_at = datetime.now(UTC)
            await session.commit()
            await session.refresh(project)

        logger.info("project_status_toggled", project_id=project_id, status=project.status)
        revalidate_project_paths(project.slug)
        return project

    async def list_projects(self, status: str | None = None, featured: bool | None = None) -> list[Project]:
        """List projects, featured first, then by sort order, newest first."""
        query = select(Project)
        if status:
            query = query.where(Project.status == status)
        if featured is not None:
            query = query.where(Project.featured.is_(featured))
        query = query.order_by(
            Project.featured.desc(),
            Project.sort_order.asc(),
            Project.created_at.desc(),
            Project.id.desc(),
        )

        async with self.session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def get(self, project_id: int) -> Project | None:
        async with self.session_factory() as session:
            return await session.get(Project, project_id)

    async def get_by_slug(self, slug: str) -> Project | None:
        async with self.session_factory() as session:
            result = await session.execute(select(Project).where(Project.slug == slug).limit(1))
            return result.scalar_one_or_none()

    async def recent(self, limit: int = 5) -> list[Project]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Project).order_by(Project.created_at.desc(), Project.id.desc()).limit(limit)
            )
            return list(result.scalars().all())

    async def stats(self) -> ProjectStats:
        async with self.session_factory() as session:
            total = (await session.execute(select(func.count(Project.id)))).scalar() or 0
            published = (
                await session.execute(select(func.count(Project.id)).where(Project.status == "published"))
            ).scalar() or 0
            draft = (
                await session.execute(select(func.count(Project.id)).where(Project.status == "draft"))
            ).scalar() or 0
            featured = (
                await session.execute(select(func.count(Project.id)).where(Project.featured.is_(True)))
            ).scalar() or 0

        return ProjectStats(total=total, published=published, draft=draft, featured=featured)
