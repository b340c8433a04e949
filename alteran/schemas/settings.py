"""Site settings Pydantic schemas."""

from pydantic import BaseModel

CONTACT_GITHUB_KEY = "contact_github"
CONTACT_EMAIL_KEY = "contact_email"


class ContactSettings(BaseModel):
    github_url: str = ""
    email: str = ""
