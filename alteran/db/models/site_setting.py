"""SiteSetting model: flat key/value store for site-wide content."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from alteran.db.base import Base


class SiteSetting(Base):
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(255), unique=True, nullable=False, index=True)
    value = Column(Text, nullable=False)

    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
