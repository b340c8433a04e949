"""Redirect unauthenticated visitors away from the admin pages."""

import re
from urllib.parse import urlencode

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from alteran.core.auth import is_authenticated

_ADMIN_PATH = re.compile(r"^/admin(/|$)")


def setup_admin_gate(app: FastAPI) -> None:
    """Send ``/admin`` page requests without a session to ``/sign-in``.

    The original path is carried in ``redirect_url`` so the sign-in form can
    send the admin back where they started. API routes are guarded separately
    by ``require_admin`` and answer 401 instead of redirecting.
    """

    @app.middleware("http")
    async def admin_gate(request: Request, call_next):
        if _ADMIN_PATH.match(request.url.path) and not is_authenticated(request):
            query = urlencode({"redirect_url": request.url.path})
            # Form posts must not be replayed against the sign-in form
            status_code = 307 if request.method in ("GET", "HEAD") else 303
            return RedirectResponse(url=f"/sign-in?{query}", status_code=status_code)
        return await call_next(request)
