"""Public server-rendered pages: home, project detail, sitemap, robots, sign-in."""

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response

from alteran.core.auth import (
    auth_configured,
    clear_session_cookie,
    is_authenticated,
    set_session_cookie,
    verify_admin_password,
)
from alteran.core.config import Settings, get_settings
from alteran.db.base import get_session_factory
from alteran.domain.images import normalize_image_url
from alteran.schemas.settings import ContactSettings
from alteran.services.project_service import ProjectService
from alteran.services.settings_service import SettingsService
from alteran.web.page_cache import get_or_render, get_page_cache
from alteran.web.templating import render, render_response

logger = structlog.get_logger(__name__)

router = APIRouter()

DEFAULT_CONTACT = ContactSettings(github_url="https://github.com/alteran-tech", email="hello@alteran.tech")
DEFAULT_REDIRECT = "/admin"


def safe_redirect(url: str | None) -> str:
    """Only allow same-site absolute paths as post-login targets."""
    if not url or not url.startswith("/") or url.startswith("//") or url.startswith("/\\"):
        return DEFAULT_REDIRECT
    return url


async def _render_home() -> str:
    session_factory = get_session_factory()
    projects = await ProjectService(session_factory).list_projects(status="published")
    contact = await SettingsService(session_factory).get_contact_settings()
    settings = get_settings()

    return render(
        "home.html",
        projects=projects,
        contact=ContactSettings(
            github_url=contact.github_url or DEFAULT_CONTACT.github_url,
            email=contact.email or DEFAULT_CONTACT.email,
        ),
        json_ld={
            "@context": "https://schema.org",
            "@type": "Organization",
            "name": "Alteran",
            "url": settings.site_url,
            "description": "Software development company building performant, elegant products.",
        },
    )


@router.get("/", response_class=HTMLResponse)
async def home():
    return HTMLResponse(await get_or_render("/", _render_home))


def _project_json_ld(project, settings: Settings) -> dict:
    data = {
        "@context": "https://schema.org",
        "@type": "SoftwareApplication",
        "name": project.title,
        "url": f"{settings.site_url}/projects/{project.slug}",
        "applicationCategory": project.category or "DeveloperApplication",
    }
    if project.description:
        data["description"] = project.description
    image = normalize_image_url(project.image_url)
    if image:
        data["image"] = image
    if project.source_url:
        data["codeRepository"] = project.source_url
    return data


@router.get("/projects/{slug}", response_class=HTMLResponse)
async def project_detail(slug: str, request: Request):
    """Project page. Drafts are visible to a signed-in admin only and never cached."""
    path = f"/projects/{slug}"
    cached = get_page_cache().get(path)
    if cached is not None:
        return HTMLResponse(cached)

    service = ProjectService(get_session_factory())
    project = await service.get_by_slug(slug)
    if project is None:
        return render_response("404.html", status_code=404, message="Проект не найден")

    settings = get_settings()

    async def _render() -> str:
        return render("project.html", project=project, json_ld=_project_json_ld(project, settings))

    if project.status != "published":
        if not is_authenticated(request, settings):
            return render_response("404.html", status_code=404, message="Проект не найден")
        return HTMLResponse(await _render())

    return HTMLResponse(await get_or_render(path, _render))


async def _render_sitemap() -> str:
    projects = await ProjectService(get_session_factory()).list_projects(status="published")
    return render("sitemap.xml", projects=projects, now=datetime.now(UTC))


@router.get("/sitemap.xml")
async def sitemap():
    body = await get_or_render("/sitemap.xml", _render_sitemap)
    return Response(content=body, media_type="application/xml")


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots(settings: Settings = Depends(get_settings)):
    return "\n".join(
        [
            "User-agent: *",
            "Allow: /",
            "Disallow: /admin/",
            "Disallow: /api/",
            "Disallow: /sign-in/",
            f"Sitemap: {settings.site_url}/sitemap.xml",
            "",
        ]
    )


@router.get("/sign-in", response_class=HTMLResponse)
async def sign_in_form(request: Request, redirect_url: str | None = None, settings: Settings = Depends(get_settings)):
    target = safe_redirect(redirect_url)
    if is_authenticated(request, settings):
        return RedirectResponse(url=target, status_code=303)
    return render_response("sign_in.html", redirect_url=target, configured=auth_configured(settings))


@router.post("/sign-in", response_class=HTMLResponse)
async def sign_in(
    password: str = Form(""),
    redirect_url: str = Form(DEFAULT_REDIRECT),
    settings: Settings = Depends(get_settings),
):
    target = safe_redirect(redirect_url)
    if not auth_configured(settings):
        return render_response("sign_in.html", status_code=503, redirect_url=target, configured=False)

    if not verify_admin_password(password, settings.admin_password):
        logger.warning("admin_login_failed")
        return render_response(
            "sign_in.html",
            status_code=401,
            redirect_url=target,
            configured=True,
            error="Неверный пароль",
        )

    response = RedirectResponse(url=target, status_code=303)
    set_session_cookie(response, settings)
    logger.info("admin_login_succeeded")
    return response


@router.post("/sign-out")
async def sign_out():
    response = RedirectResponse(url="/", status_code=303)
    clear_session_cookie(response)
    return response
