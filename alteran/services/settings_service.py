"""SettingsService: key/value site settings (contact details etc.)."""

from datetime import UTC, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from alteran.db.models.site_setting import SiteSetting
from alteran.schemas.settings import CONTACT_EMAIL_KEY, CONTACT_GITHUB_KEY, ContactSettings
from alteran.web.page_cache import revalidate_path

logger = structlog.get_logger(__name__)


class SettingsService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with self.session_factory() as session:
            result = await session.execute(select(SiteSetting.value).where(SiteSetting.key == key).limit(1))
            return result.scalar_one_or_none()

    async def get_many(self, keys: list[str]) -> dict[str, str]:
        """Return the stored values for ``keys``; missing keys are omitted."""
        if not keys:
            return {}
        async with self.session_factory() as session:
            result = await session.execute(
                select(SiteSetting.key, SiteSetting.value).where(SiteSetting.key.in_(keys))
            )
            return {key: value for key, value in result.all()}

    async def set(self, key: str, value: str) -> None:
        """Upsert a single setting."""
        now = datetime.now(UTC)
        stmt = insert(SiteSetting).values(key=key, value=value, updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=[SiteSetting.key],
            set_={"value": value, "updated_at": now},
        )
        async with self.session_factory() as session:
            await session.execute(stmt)
            await session.commit()

    async def get_contact_settings(self) -> ContactSettings:
        values = await self.get_many([CONTACT_GITHUB_KEY, CONTACT_EMAIL_KEY])
        return ContactSettings(
            github_url=values.get(CONTACT_GITHUB_KEY, ""),
            email=values.get(CONTACT_EMAIL_KEY, ""),
        )

    async def save_contact_settings(self, data: ContactSettings) -> ContactSettings:
        saved = ContactSettings(github_url=data.github_url.strip(), email=data.email.strip())
        await self.set(CONTACT_GITHUB_KEY, saved.github_url)
        await self.set(CONTACT_EMAIL_KEY, saved.email)

        logger.info("contact_settings_saved")
        revalidate_path("/")
        revalidate_path("/admin/settings")
        return saved
