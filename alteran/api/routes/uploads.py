"""Image upload and serving."""

import asyncio
import time
from pathlib import Path

import structlog
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse, Response

from alteran.core.auth import require_admin
from alteran.core.config import Settings, get_settings
from alteran.core.exceptions import AlteranError, ValidationError
from alteran.domain.images import UPLOADS_ROUTE

logger = structlog.get_logger(__name__)

router = APIRouter()

# extension -> MIME type for everything we accept and serve
MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "gif": "image/gif",
    "avif": "image/avif",
}
ALLOWED_TYPES = frozenset(MIME_TYPES.values())
_DEFAULT_EXTENSION = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp", "image/gif": "gif", "image/avif": "avif"}

IMMUTABLE_CACHE = "public, max-age=31536000, immutable"


def _extension(filename: str | None, content_type: str) -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].lower()
        if ext not in MIME_TYPES:
            raise ValidationError("Only images are allowed (JPG, PNG, WEBP, GIF, AVIF)")
        return ext
    return _DEFAULT_EXTENSION[content_type]


def _unique_path(directory: Path, ext: str) -> Path:
    stamp = int(time.time() * 1000)
    path = directory / f"{stamp}.{ext}"
    while path.exists():
        stamp += 1
        path = directory / f"{stamp}.{ext}"
    return path


@router.post("/upload", dependencies=[Depends(require_admin)])
async def upload_image(file: UploadFile | None = File(None), settings: Settings = Depends(get_settings)):
    """Store an uploaded image and return the URL it is served from.

    Raises:
        ValidationError(400): Missing file, wrong type or extension, too large
    """
    if file is None:
        raise ValidationError("No file provided")

    if file.content_type not in ALLOWED_TYPES:
        raise ValidationError("Only images are allowed (JPG, PNG, WEBP, GIF, AVIF)")

    ext = _extension(file.filename, file.content_type)

    data = await file.read(settings.upload_max_bytes + 1)
    if len(data) > settings.upload_max_bytes:
        raise ValidationError(f"File too large. Maximum is {settings.upload_max_bytes // (1024 * 1024)} MB.")

    directory = Path(settings.upload_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path = _unique_path(directory, ext)
        await asyncio.to_thread(path.write_bytes, data)
    except OSError as e:
        logger.error("upload_write_failed", error=str(e), error_type=type(e).__name__)
        raise AlteranError("Failed to save the file") from e

    logger.info("image_uploaded", filename=path.name, size=len(data), content_type=file.content_type)
    return {"url": f"{UPLOADS_ROUTE}{path.name}"}


@router.get("/uploads/{filename}")
async def serve_upload(filename: str, settings: Settings = Depends(get_settings)):
    """Serve a previously uploaded image with long-lived cache headers."""
    if not filename or ".." in filename or "/" in filename or "\\" in filename:
        return Response(status_code=404)

    path = Path(settings.upload_dir) / filename
    if not path.is_file():
        return Response(status_code=404)

    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return FileResponse(
        path,
        media_type=MIME_TYPES.get(ext, "application/octet-stream"),
        headers={"Cache-Control": IMMUTABLE_CACHE},
    )
