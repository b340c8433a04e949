from fastapi import APIRouter, Depends
from pydantic import BaseModel

from alteran.core.auth import require_admin
from alteran.db.base import get_session_factory
from alteran.schemas.settings import ContactSettings
from alteran.services.settings_service import SettingsService

router = APIRouter(dependencies=[Depends(require_admin)])


class ContactSettingsBody(BaseModel):
    contact_github: str = ""
    contact_email: str = ""


def _to_body(contact: ContactSettings) -> ContactSettingsBody:
    return ContactSettingsBody(contact_github=contact.github_url, contact_email=contact.email)


@router.get("", response_model=ContactSettingsBody)
async def get_contact_settings():
    service = SettingsService(get_session_factory())
    return _to_body(await service.get_contact_settings())


@router.put("", response_model=ContactSettingsBody)
async def save_contact_settings(body: ContactSettingsBody):
    service = SettingsService(get_session_factory())
    saved = await service.save_contact_settings(
        ContactSettings(github_url=body.contact_github, email=body.contact_email)
    )
    return _to_body(saved)
