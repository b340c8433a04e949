"""Image URL normalisation for uploaded files."""

from urllib.parse import urlparse

UPLOADS_ROUTE = "/api/uploads/"
_LEGACY_PREFIX = "/uploads/"


def normalize_image_url(url: str | None) -> str | None:
    """Route upload URLs through the ``/api/uploads/`` handler.

    - "https://alteran.tech/uploads/img.png" -> "/api/uploads/img.png"
    - "/uploads/img.png" -> "/api/uploads/img.png"
    - "/api/uploads/img.png" -> unchanged
    - external URLs (GitHub etc.) -> unchanged
    """
    if not url:
        return None

    if url.startswith(UPLOADS_ROUTE):
        return url

    if url.startswith(_LEGACY_PREFIX):
        return UPLOADS_ROUTE + url[len(_LEGACY_PREFIX):]

    parsed = urlparse(url)
    if parsed.scheme and parsed.netloc and parsed.path.startswith(_LEGACY_PREFIX):
        return UPLOADS_ROUTE + parsed.path[len(_LEGACY_PREFIX):]

    return url
