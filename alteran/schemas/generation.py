"""Generation Pydantic schemas: AI-assisted project copywriting."""

from pydantic import BaseModel, Field


class GenerateInput(BaseModel):
    title: str = ""
    keywords: str | None = None
    context: str | None = None


class GenerateResult(BaseModel):
    description: str = ""
    content: str = ""
    tech_stack: list[str] = Field(default_factory=list)


class ParseRequest(BaseModel):
    raw: str
