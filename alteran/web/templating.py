"""Jinja2 rendering for the server-rendered site and admin panel."""

from datetime import datetime
from pathlib import Path
from typing import Any

from fastapi.responses import HTMLResponse
from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from alteran.core.config import get_settings
from alteran.domain.images import normalize_image_url
from alteran.domain.markdown import render_markdown

TEMPLATE_DIR = Path(__file__).parent / "templates"


def _markdown_filter(value: str | None) -> Markup:
    # render_markdown escapes raw HTML; only the tags it emits survive
    return Markup(render_markdown(value))


def _date_filter(value: datetime | None, fmt: str = "%d %b %Y") -> str:
    return value.strftime(fmt) if value else ""


def _build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
    )
    env.filters["markdown"] = _markdown_filter
    env.filters["image_url"] = normalize_image_url
    env.filters["date"] = _date_filter
    return env


env = _build_environment()


def render(template_name: str, **context: Any) -> str:
    """Render a template with the site-wide context (app name, site URL)."""
    settings = get_settings()
    template = env.get_template(template_name)
    return template.render(app_name=settings.app_name, site_url=settings.site_url, **context)


def render_response(template_name: str, status_code: int = 200, **context: Any) -> HTMLResponse:
    return HTMLResponse(render(template_name, **context), status_code=status_code)
