"""In-process cache of rendered public pages.

Public pages are rendered once and served from memory until either the TTL
passes or an admin mutation revalidates the path.
"""

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class CachedPage:
    body: str
    expires_at: float


class PageCache:
    def __init__(self, ttl_seconds: int = 3600, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._pages: dict[str, CachedPage] = {}

    def get(self, path: str) -> str | None:
        page = self._pages.get(path)
        if page is None:
            return None
        if page.expires_at <= self._clock():
            del self._pages[path]
            return None
        return page.body

    def set(self, path: str, body: str) -> None:
        self._pages[path] = CachedPage(body=body, expires_at=self._clock() + self.ttl_seconds)

    def revalidate(self, path: str) -> bool:
        """Drop a cached page. Returns True when something was evicted."""
        evicted = self._pages.pop(path, None) is not None
        logger.info("page_revalidated", path=path, evicted=evicted)
        return evicted

    def clear(self) -> None:
        self._pages.clear()


_page_cache: PageCache | None = None


def get_page_cache() -> PageCache:
    """Return the process-wide page cache, creating it on first use."""
    global _page_cache
    if _page_cache is None:
        from alteran.core.config import get_settings

        _page_cache = PageCache(ttl_seconds=get_settings().page_revalidate_seconds)
    return _page_cache


def reset_page_cache() -> None:
    global _page_cache
    _page_cache = None


def revalidate_path(path: str) -> bool:
    return get_page_cache().revalidate(path)


def revalidate_project_paths(slug: str | None = None) -> None:
    """Revalidate every page that lists or shows a project."""
    for path in ("/", "/sitemap.xml", "/admin", "/admin/projects"):
        revalidate_path(path)
    if slug:
        revalidate_path(f"/projects/{slug}")


async def get_or_render(path: str, render: Callable[[], Awaitable[str]]) -> str:
    """Serve ``path`` from the page cache, rendering and storing it on a miss."""
    cache = get_page_cache()
    body = cache.get(path)
    if body is None:
        body = await render()
        cache.set(path, body)
    return body
