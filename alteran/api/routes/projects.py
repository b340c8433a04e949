"""Project CRUD API routes."""

from fastapi import APIRouter, Depends, Query

from alteran.core.auth import require_admin
from alteran.core.exceptions import ProjectNotFoundError
from alteran.db.base import get_session_factory
from alteran.schemas.projects import ProjectCreate, ProjectResponse, ProjectStatus, ProjectUpdate
from alteran.services.project_service import ProjectService

router = APIRouter()


@router.get("", response_model=list[ProjectResponse])
async def list_published_projects():
    """Public listing: published projects, featured first."""
    service = ProjectService(get_session_factory())
    projects = await service.list_projects(status="published")
    return [ProjectResponse.from_model(p) for p in projects]


@router.get("/all", response_model=list[ProjectResponse], dependencies=[Depends(require_admin)])
async def list_all_projects(
    status: ProjectStatus | None = Query(None),
    featured: bool | None = Query(None),
):
    """Admin listing with optional status and featured filters."""
    service = ProjectService(get_session_factory())
    projects = await service.list_projects(status=status, featured=featured)
    return [ProjectResponse.from_model(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: int):
    service = ProjectService(get_session_factory())
    project = await service.get(project_id)
    if project is None:
        raise ProjectNotFoundError()
    return ProjectResponse.from_model(project)


@router.post("", response_model=ProjectResponse, status_code=201, dependencies=[Depends(require_admin)])
async def create_project(body: ProjectCreate):
    """Create a project. The slug is derived from the title.

    Raises:
        ValidationError(400): Blank title
    """
    service = ProjectService(get_session_factory())
    project = await service.create(body)
    return ProjectResponse.from_model(project)


@router.put("/{project_id}", response_model=ProjectResponse, dependencies=[Depends(require_admin)])
async def update_project(project_id: int, body: ProjectUpdate):
    """Partial update: only the fields present in the body are touched."""
    service = ProjectService(get_session_factory())
    project = await service.update(project_id, body)
    return ProjectResponse.from_model(project)


@router.post("/{project_id}/toggle", response_model=ProjectResponse, dependencies=[Depends(require_admin)])
async def toggle_project_status(project_id: int):
    service = ProjectService(get_session_factory())
    project = await service.toggle_status(project_id)
    return ProjectResponse.from_model(project)


@router.delete("/{project_id}", dependencies=[Depends(require_admin)])
async def delete_project(project_id: int):
    service = ProjectService(get_session_factory())
    await service.delete(project_id)
    return {"success": True}
