"""Project model: portfolio entries shown on the public site."""

import json
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from alteran.db.base import Base


def _decode_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        return []
    return [str(item) for item in value] if isinstance(value, list) else []


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=True)  # markdown
    image_url = Column(String(1000), nullable=True)
    live_url = Column(String(1000), nullable=True)
    source_url = Column(String(1000), nullable=True)

    # GitHub provenance
    github_owner = Column(String(255), nullable=True)
    github_repo = Column(String(255), nullable=True)
    github_stars = Column(Integer, nullable=True, default=0)
    github_language = Column(String(100), nullable=True)
    github_topics = Column(Text, nullable=True)  # JSON string array
    tech_stack = Column(Text, nullable=True)  # JSON string array

    category = Column(String(100), nullable=True)
    featured = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="draft")  # draft | published
    source = Column(String(20), nullable=False, default="manual")  # manual | github | generated

    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @property
    def tech_stack_list(self) -> list[str]:
        return _decode_list(self.tech_stack)

    @property
    def github_topics_list(self) -> list[str]:
        return _decode_list(self.github_topics)
