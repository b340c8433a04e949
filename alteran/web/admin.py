"""Admin panel pages and form handlers.

Access is enforced by the admin gate middleware, which redirects anonymous
visitors to ``/sign-in`` before any handler here runs.
"""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.datastructures import FormData

from alteran.core.exceptions import ProjectNotFoundError, ValidationError
from alteran.db.base import get_session_factory
from alteran.schemas.projects import ProjectCreate, ProjectUpdate
from alteran.schemas.settings import ContactSettings
from alteran.services.project_service import ProjectService
from alteran.services.settings_service import SettingsService
from alteran.web.page_cache import get_or_render
from alteran.web.templating import render, render_response

router = APIRouter(prefix="/admin")

_SOURCES = ("manual", "github", "generated")
_TRUTHY = ("true", "on", "1")


def _split_csv(value: str | None) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def _to_int(value: str | None, default: int = 0) -> int:
    try:
        return int(value) if value not in (None, "") else default
    except ValueError:
        return default


def _form_fields(form: FormData) -> dict:
    """Convert the project form into payload fields for the service layer."""

    def text(name: str) -> str:
        return str(form.get(name) or "").strip()

    source = text("source")
    return {
        "title": text("title"),
        "description": text("description"),
        "content": text("content"),
        "image_url": text("image_url"),
        "live_url": text("live_url"),
        "source_url": text("source_url"),
        "github_owner": text("github_owner"),
        "github_repo": text("github_repo"),
        "github_stars": _to_int(text("github_stars")),
        "github_language": text("github_language"),
        "github_topics": _split_csv(text("github_topics")),
        "tech_stack": _split_csv(text("tech_stack")),
        "category": text("category"),
        "featured": text("featured").lower() in _TRUTHY,
        "sort_order": _to_int(text("sort_order")),
        "status": "published" if text("status") == "published" else "draft",
        "source": source if source in _SOURCES else "manual",
    }


def _project_form(project) -> dict:
    return {
        "title": project.title,
        "description": project.description,
        "content": project.content,
        "image_url": project.image_url,
        "live_url": project.live_url,
        "source_url": project.source_url,
        "github_owner": project.github_owner,
        "github_repo": project.github_repo,
        "github_stars": project.github_stars,
        "github_language": project.github_language,
        "github_topics": ", ".join(project.github_topics_list),
        "tech_stack": ", ".join(project.tech_stack_list),
        "category": project.category,
        "featured": project.featured,
        "sort_order": project.sort_order,
        "status": project.status,
        "source": project.source,
    }


def _form_for_display(fields: dict) -> dict:
    return {
        **fields,
        "tech_stack": ", ".join(fields["tech_stack"]),
        "github_topics": ", ".join(fields["github_topics"]),
    }


def _back_to_projects() -> RedirectResponse:
    return RedirectResponse(url="/admin/projects", status_code=303)


async def _render_dashboard() -> str:
    service = ProjectService(get_session_factory())
    return render("admin/dashboard.html", stats=await service.stats(), recent=await service.recent(5))


@router.get("", response_class=HTMLResponse)
async def dashboard():
    return HTMLResponse(await get_or_render("/admin", _render_dashboard))


async def _render_project_list() -> str:
    projects = await ProjectService(get_session_factory()).list_projects()
    return render("admin/projects.html", projects=projects)


@router.get("/projects", response_class=HTMLResponse)
async def project_list(status: str | None = None, featured: bool | None = None):
    if status is None and featured is None:
        return HTMLResponse(await get_or_render("/admin/projects", _render_project_list))

    projects = await ProjectService(get_session_factory()).list_projects(status=status, featured=featured)
    return render_response("admin/projects.html", projects=projects)


@router.get("/projects/new", response_class=HTMLResponse)
async def new_project_form():
    return render_response("admin/project_form.html", project=None, form={}, action="/admin/projects/new")


@router.post("/projects/new", response_class=HTMLResponse)
async def create_project(request: Request):
    fields = _form_fields(await request.form())
    try:
        await ProjectService(get_session_factory()).create(ProjectCreate(**fields))
    except ValidationError as e:
        return render_response(
            "admin/project_form.html",
            status_code=400,
            project=None,
            form=_form_for_display(fields),
            action="/admin/projects/new",
            error=e.message,
        )
    return _back_to_projects()


@router.get("/projects/{project_id}/edit", response_class=HTMLResponse)
async def edit_project_form(project_id: int):
    project = await ProjectService(get_session_factory()).get(project_id)
    if project is None:
        raise ProjectNotFoundError()
    return render_response(
        "admin/project_form.html",
        project=project,
        form=_project_form(project),
        action=f"/admin/projects/{project_id}/edit",
    )


@router.post("/projects/{project_id}/edit", response_class=HTMLResponse)
async def update_project(project_id: int, request: Request):
    fields = _form_fields(await request.form())
    service = ProjectService(get_session_factory())
    try:
        await service.update(project_id, ProjectUpdate(**fields))
    except ValidationError as e:
        return render_response(
            "admin/project_form.html",
            status_code=400,
            project=await service.get(project_id),
            form=_form_for_display(fields),
            action=f"/admin/projects/{project_id}/edit",
            error=e.message,
        )
    return _back_to_projects()


@router.post("/projects/{project_id}/toggle")
async def toggle_project(project_id: int):
    await ProjectService(get_session_factory()).toggle_status(project_id)
    return _back_to_projects()


@router.post("/projects/{project_id}/delete")
async def delete_project(project_id: int):
    await ProjectService(get_session_factory()).delete(project_id)
    return _back_to_projects()


@router.get("/settings", response_class=HTMLResponse)
async def settings_form(saved: bool = False):
    contact = await SettingsService(get_session_factory()).get_contact_settings()
    return render_response("admin/settings.html", contact=contact, saved=saved)


@router.post("/settings")
async def save_settings(request: Request):
    form = await request.form()
    await SettingsService(get_session_factory()).save_contact_settings(
        ContactSettings(
            github_url=str(form.get("github_url") or ""),
            email=str(form.get("email") or ""),
        )
    )
    return RedirectResponse(url="/admin/settings?saved=true", status_code=303)
