"""OpenRouter integration: streamed project copywriting for the admin panel.

The relay opens a streaming chat completion, pulls text deltas out of the
upstream SSE lines and re-emits them as our own SSE frames:

    data: {"text": "..."}\n\n      one per delta, in upstream order
    data: {"error": "..."}\n\n     at most one, always followed by [DONE]
    data: [DONE]\n\n               always last
"""

import json
import re
from collections.abc import AsyncIterator, Awaitable, Callable

import httpx
import structlog

from alteran.core.config import Settings, get_settings
from alteran.core.exceptions import FeatureNotConfiguredError
from alteran.schemas.generation import GenerateInput, GenerateResult

logger = structlog.get_logger(__name__)

DONE_EVENT = "data: [DONE]\n\n"

# Primary model answers with these when it is unavailable; retry once on the fallback
FALLBACK_STATUSES = frozenset({404, 503})

SYSTEM_PROMPT = """You are an experienced technical writer who specialises in project descriptions for developer portfolios.
Given a project title, keywords and context, generate:

1. SHORT_DESCRIPTION: a compelling 1-2 sentence summary for the portfolio card
2. DETAILED_CONTENT: a detailed project write-up in Markdown with this structure:
   - ## Overview: 2-3 sentences on what it is and why it exists
   - ## Key features: a bullet list with **bold** feature names and a short explanation each
   - ## Technical decisions: what was hard, how it was solved, notable architecture choices
   - ## Outcome: what came out of it and which problem it solves
   Use **bold** for emphasis, `inline code` for technical terms, ## and ### headings for structure.
3. TECH_STACK: a comma-separated list of technologies (at most 8)

Write all prose in {language}. Write the TECH_STACK entries in English.

Answer STRICTLY in this format:
---SHORT_DESCRIPTION---
[short description]
---DETAILED_CONTENT---
[detailed Markdown description]
---TECH_STACK---
[Tech, Stack, Comma, Separated]"""

_DESCRIPTION = re.compile(r"---SHORT_DESCRIPTION---\s*([\s\S]*?)(?=---DETAILED_CONTENT---|$)")
_CONTENT = re.compile(r"---DETAILED_CONTENT---\s*([\s\S]*?)(?=---TECH_STACK---|$)")
_TECH_STACK = re.compile(r"---TECH_STACK---\s*([\s\S]*?)$")


def sse_event(payload: dict) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def build_user_message(data: GenerateInput) -> str:
    message = f"Project Title: {data.title}"
    if data.keywords:
        message += f"\nKeywords / Description: {data.keywords}"
    if data.context:
        message += f"\nAdditional Context: {data.context}"
    return message


def parse_generate_output(raw: str) -> GenerateResult:
    """Split the model's marker-delimited answer into project fields."""
    description = _DESCRIPTION.search(raw)
    content = _CONTENT.search(raw)
    tech = _TECH_STACK.search(raw)

    tech_raw = tech.group(1).strip() if tech else ""
    return GenerateResult(
        description=description.group(1).strip() if description else "",
        content=content.group(1).strip() if content else "",
        tech_stack=[item.strip() for item in tech_raw.split(",") if item.strip()],
    )


class _Done:
    pass


_DONE = _Done()


def _parse_upstream_line(line: str) -> str | _Done | None:
    """Extract a text delta from one upstream SSE line.

    Returns the delta text, ``_DONE`` for the terminator, or None for lines
    that carry nothing (comments, blanks, keep-alives, malformed JSON).
    """
    trimmed = line.strip()
    if not trimmed or trimmed.startswith(":") or not trimmed.startswith("data:"):
        return None

    data = trimmed[5:].lstrip()
    if data == "[DONE]":
        return _DONE

    try:
        chunk = json.loads(data)
        content = chunk["choices"][0]["delta"].get("content")
    except (ValueError, KeyError, IndexError, TypeError, AttributeError):
        return None
    return content or None


def _error_message(response: httpx.Response) -> str:
    if response.status_code == 401:
        return "Invalid OpenRouter API key. Check your OPENROUTER_API_KEY."
    if response.status_code == 429:
        return "Rate limit exceeded. Please wait a moment and try again."

    try:
        body = response.json()
        message = body["error"]["message"]
    except (ValueError, KeyError, TypeError):
        message = None
    return message or f"OpenRouter API error: {response.status_code}"


class OpenRouterClient:
    """Streams chat completions from OpenRouter."""

    def __init__(self, settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings or get_settings()
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.settings.openrouter_api_key)

    def ensure_configured(self) -> None:
        if not self.configured:
            raise FeatureNotConfiguredError(
                "OpenRouter API key is not configured. Set OPENROUTER_API_KEY in your environment variables."
            )

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.openrouter_api_key}",
            "HTTP-Referer": self.settings.site_url,
            "X-Title": self.settings.app_name,
        }

    def _request_body(self, data: GenerateInput, model: str) -> dict:
        return {
            "model": model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT.format(language=self.settings.generation_language)},
                {"role": "user", "content": build_user_message(data)},
            ],
            "stream": True,
            "temperature": self.settings.openrouter_temperature,
            "max_tokens": self.settings.openrouter_max_tokens,
        }

    async def _send(self, client: httpx.AsyncClient, data: GenerateInput, model: str) -> httpx.Response:
        request = client.build_request(
            "POST",
            self.settings.openrouter_api_url,
            headers=self._headers(),
            json=self._request_body(data, model),
        )
        return await client.send(request, stream=True)

    async def stream_project_content(
        self,
        data: GenerateInput,
        is_disconnected: Callable[[], Awaitable[bool]] | None = None,
    ) -> AsyncIterator[str]:
        """Yield SSE frames for a generated project description.

        Args:
            data: Title, keywords and optional context for the prompt
            is_disconnected: Optional probe for the inbound client; relaying
                stops quietly once it reports True

        Every path ends with ``DONE_EVENT`` unless the client went away.
        """
        timeout = httpx.Timeout(60.0, connect=10.0)
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=timeout) as client:
                response = await self._send(client, data, self.settings.openrouter_model)
                try:
                    if response.status_code in FALLBACK_STATUSES:
                        logger.warning(
                            "openrouter_primary_unavailable",
                            model=self.settings.openrouter_model,
                            status_code=response.status_code,
                            fallback_model=self.settings.openrouter_fallback_model,
                        )
                        await response.aclose()
                        response = await self._send(client, data, self.settings.openrouter_fallback_model)

                    if response.status_code >= 400:
                        await response.aread()
                        message = _error_message(response)
                        logger.warning("openrouter_request_rejected", status_code=response.status_code, error=message)
                        yield sse_event({"error": message})
                        yield DONE_EVENT
                        return

                    async for frame in self._relay(response, is_disconnected):
                        yield frame
                finally:
                    await response.aclose()
        except httpx.HTTPError as e:
            logger.warning("openrouter_stream_failed", error=str(e), error_type=type(e).__name__)
            yield sse_event({"error": str(e) or "Failed to reach OpenRouter"})
            yield DONE_EVENT

    async def _relay(
        self,
        response: httpx.Response,
        is_disconnected: Callable[[], Awaitable[bool]] | None,
    ) -> AsyncIterator[str]:
        buffer = ""
        deltas = 0

        async for chunk in response.aiter_text():
            buffer += chunk
            lines = buffer.split("\n")
            # The last element may be a partial line; keep it for the next chunk
            buffer = lines.pop()

            for line in lines:
                parsed = _parse_upstream_line(line)
                if parsed is _DONE:
                    logger.info("openrouter_stream_complete", deltas=deltas)
                    yield DONE_EVENT
                    return
                if parsed:
                    deltas += 1
                    yield sse_event({"text": parsed})

            if is_disconnected is not None and await is_disconnected():
                logger.info("openrouter_client_disconnected", deltas=deltas)
                return

        parsed = _parse_upstream_line(buffer)
        if parsed and parsed is not _DONE:
            deltas += 1
            yield sse_event({"text": parsed})

        logger.info("openrouter_stream_complete", deltas=deltas)
        yield DONE_EVENT
