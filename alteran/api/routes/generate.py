"""AI-assisted project copywriting routes."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from alteran.core.auth import require_admin
from alteran.core.config import get_settings
from alteran.core.exceptions import ValidationError
from alteran.integrations.openrouter import OpenRouterClient, parse_generate_output
from alteran.schemas.generation import GenerateInput, GenerateResult, ParseRequest

router = APIRouter(dependencies=[Depends(require_admin)])

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def get_openrouter_client() -> OpenRouterClient:
    """Dependency that provides the OpenRouter client.

    Override this dependency in tests via app.dependency_overrides.
    """
    return OpenRouterClient(get_settings())


@router.post("")
async def generate_project_content(
    body: GenerateInput,
    request: Request,
    client: OpenRouterClient = Depends(get_openrouter_client),
):
    """Stream a generated description, detailed content and tech stack as SSE.

    Raises:
        ValidationError(400): Blank title
        FeatureNotConfiguredError(503): OPENROUTER_API_KEY unset
    """
    title = body.title.strip()
    if not title:
        raise ValidationError("Title is required")
    client.ensure_configured()

    data = GenerateInput(
        title=title,
        keywords=(body.keywords or "").strip(),
        context=(body.context or "").strip() or None,
    )
    return StreamingResponse(
        client.stream_project_content(data, is_disconnected=request.is_disconnected),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.post("/parse", response_model=GenerateResult)
async def parse_generated_output(body: ParseRequest):
    """Split a finished generation into description, content and tech stack."""
    return parse_generate_output(body.raw)
