import time
from typing import Any

from fastapi import APIRouter, Body, Depends

from alteran.core.auth import require_admin
from alteran.core.exceptions import ValidationError
from alteran.web.page_cache import revalidate_path

router = APIRouter()


@router.post("/revalidate", dependencies=[Depends(require_admin)])
async def revalidate(payload: dict[str, Any] = Body(...)):
    """Evict a rendered page so the next request re-renders it."""
    path = payload.get("path")
    if not path or not isinstance(path, str):
        raise ValidationError("Missing or invalid 'path' in request body")

    revalidate_path(path)
    return {"revalidated": True, "path": path, "timestamp": int(time.time() * 1000)}
