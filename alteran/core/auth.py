"""Admin session authentication for FastAPI.

Sessions are a single signed cookie. The token is
``base64(json({"exp": <epoch>})) + "." + base64(hmac_sha256(secret, payload))``
so it can be verified without any server-side state.
"""

import base64
import binascii
import hashlib
import hmac
import json
import time

from fastapi import Depends, HTTPException, Request, Response

from alteran.core.config import Settings, get_settings

SESSION_COOKIE = "admin_session"


def _sign(payload_b64: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), payload_b64.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def create_session_token(secret: str, max_age: int = 60 * 60 * 24 * 7, now: float | None = None) -> str:
    """Create a signed session token that expires ``max_age`` seconds from now."""
    issued = int(now if now is not None else time.time())
    payload = json.dumps({"exp": issued + max_age}, separators=(",", ":"))
    payload_b64 = base64.b64encode(payload.encode("utf-8")).decode("ascii")
    return f"{payload_b64}.{_sign(payload_b64, secret)}"


def verify_session_token(token: str, secret: str, now: float | None = None) -> bool:
    """Return True when the token signature matches and it has not expired.

    Malformed tokens of any shape are reported as invalid, never raised.
    """
    payload_b64, dot, signature = token.rpartition(".")
    if not dot or not payload_b64:
        return False

    expected = _sign(payload_b64, secret).encode("ascii")
    if not hmac.compare_digest(expected, signature.encode("utf-8")):
        return False

    try:
        payload = json.loads(base64.b64decode(payload_b64, validate=True))
    except (binascii.Error, ValueError):
        return False

    exp = payload.get("exp") if isinstance(payload, dict) else None
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return False

    current = int(now if now is not None else time.time())
    return exp > current


def verify_admin_password(candidate: str, expected: str) -> bool:
    """Constant-time password check.

    Both sides are hashed first so the comparison does not leak the length of
    the configured password.
    """
    candidate_hash = hashlib.sha256(candidate.encode("utf-8")).digest()
    expected_hash = hashlib.sha256(expected.encode("utf-8")).digest()
    return hmac.compare_digest(candidate_hash, expected_hash)


def auth_configured(settings: Settings) -> bool:
    return bool(settings.admin_password and settings.auth_secret)


def is_authenticated(request: Request, settings: Settings | None = None) -> bool:
    """Check the session cookie on an incoming request."""
    settings = settings or get_settings()
    token = request.cookies.get(SESSION_COOKIE)
    if not token or not settings.auth_secret:
        return False
    return verify_session_token(token, settings.auth_secret)


async def require_admin(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """FastAPI dependency that rejects requests without a valid admin session.

    Usage::

        @router.post("/protected", dependencies=[Depends(require_admin)])
        async def protected():
            ...
    """
    if not is_authenticated(request, settings):
        raise HTTPException(status_code=401, detail="Unauthorized")
    request.state.user_id = "admin"


def set_session_cookie(response: Response, settings: Settings) -> None:
    """Issue a fresh admin session cookie on ``response``."""
    token = create_session_token(settings.auth_secret, max_age=settings.session_max_age)
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=settings.session_max_age,
        path="/",
        httponly=True,
        secure=not settings.debug,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE, path="/")
