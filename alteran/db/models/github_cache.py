"""GitHubCacheEntry model: TTL cache for GitHub repository lookups."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from alteran.db.base import Base


class GitHubCacheEntry(Base):
    __tablename__ = "github_cache"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cache_key = Column(String(512), unique=True, nullable=False, index=True)
    data = Column(Text, nullable=False)  # JSON-serialized GitHubRepo
    expires_at = Column(Integer, nullable=False)  # unix timestamp (seconds)

    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
