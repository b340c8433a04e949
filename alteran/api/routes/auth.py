"""Admin session endpoints."""

import structlog
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from alteran.core.auth import auth_configured, clear_session_cookie, set_session_cookie, verify_admin_password
from alteran.core.config import Settings, get_settings
from alteran.core.exceptions import AlteranError, FeatureNotConfiguredError

logger = structlog.get_logger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    password: str = ""


@router.post("/login")
async def login(body: LoginRequest, response: Response, settings: Settings = Depends(get_settings)):
    """Exchange the admin password for a signed session cookie.

    Raises:
        FeatureNotConfiguredError(503): ADMIN_PASSWORD or AUTH_SECRET unset
        AlteranError(401): Wrong password
    """
    if not auth_configured(settings):
        raise FeatureNotConfiguredError("Authentication is not configured")

    if not verify_admin_password(body.password, settings.admin_password):
        logger.warning("admin_login_failed")
        raise AlteranError("Invalid password", 401)

    set_session_cookie(response, settings)
    logger.info("admin_login_succeeded")
    return {"success": True}


@router.post("/logout")
async def logout(response: Response):
    clear_session_cookie(response)
    return {"success": True}
