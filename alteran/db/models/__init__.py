"""Re-export all models so Base.metadata sees them."""

from alteran.db.models.github_cache import GitHubCacheEntry
from alteran.db.models.project import Project
from alteran.db.models.site_setting import SiteSetting

__all__ = [
    "GitHubCacheEntry",
    "Project",
    "SiteSetting",
]
