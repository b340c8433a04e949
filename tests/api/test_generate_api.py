"""Tests for the streamed generation endpoints."""

import json

import httpx
import pytest

from alteran.api.routes.generate import get_openrouter_client
from alteran.core.config import Settings
from alteran.integrations.openrouter import OpenRouterClient

pytestmark = pytest.mark.unit


def _delta(text: str) -> str:
    return "data: " + json.dumps({"choices": [{"delta": {"content": text}}]}) + "\n\n"


def _frames(body: str) -> list[str]:
    return [frame for frame in body.split("\n\n") if frame]


@pytest.fixture
def upstream_requests():
    return []


@pytest.fixture
def stub_openrouter(api_client, upstream_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        upstream_requests.append(json.loads(request.content))
        body = _delta("Fast ") + _delta("HTTP/2.") + "data: [DONE]\n\n"
        return httpx.Response(200, text=body, headers={"content-type": "text/event-stream"})

    settings = Settings(openrouter_api_key="sk-or-test", openrouter_model="primary/model")
    client = OpenRouterClient(settings, transport=httpx.MockTransport(handler))
    api_client.app.dependency_overrides[get_openrouter_client] = lambda: client
    yield client
    api_client.app.dependency_overrides.clear()


class TestGenerate:
    def test_streams_sse_frames(self, admin_client, stub_openrouter, upstream_requests):
        response = admin_client.post("/api/generate", json={"title": "  Hyperframe ", "keywords": "http2"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache, no-transform"
        assert response.headers["x-accel-buffering"] == "no"
        assert _frames(response.text) == [
            'data: {"text": "Fast "}',
            'data: {"text": "HTTP/2."}',
            "data: [DONE]",
        ]
        user_message = upstream_requests[0]["messages"][1]["content"]
        assert user_message == "Project Title: Hyperframe\nKeywords / Description: http2"

    def test_null_keywords_treated_as_empty(self, admin_client, stub_openrouter, upstream_requests):
        response = admin_client.post("/api/generate", json={"title": "Hyperframe", "keywords": None})

        assert response.status_code == 200
        assert upstream_requests[0]["messages"][1]["content"] == "Project Title: Hyperframe"

    def test_blank_title(self, admin_client, stub_openrouter, upstream_requests):
        response = admin_client.post("/api/generate", json={"title": "   "})

        assert response.status_code == 400
        assert response.json()["error"] == "Title is required"
        assert upstream_requests == []

    def test_missing_api_key(self, admin_client):
        response = admin_client.post("/api/generate", json={"title": "Hyperframe"})

        assert response.status_code == 503
        assert "OPENROUTER_API_KEY" in response.json()["error"]

    def test_blank_title_checked_before_api_key(self, admin_client):
        assert admin_client.post("/api/generate", json={"title": ""}).status_code == 400


class TestParse:
    def test_parse_sections(self, admin_client):
        raw = (
            "---SHORT_DESCRIPTION---\nA framing layer.\n"
            "---DETAILED_CONTENT---\n## Overview\nFrames.\n"
            "---TECH_STACK---\nPython, Cython, , Rust"
        )

        response = admin_client.post("/api/generate/parse", json={"raw": raw})

        assert response.status_code == 200
        assert response.json() == {
            "description": "A framing layer.",
            "content": "## Overview\nFrames.",
            "tech_stack": ["Python", "Cython", "Rust"],
        }

    def test_parse_without_markers(self, admin_client):
        response = admin_client.post("/api/generate/parse", json={"raw": "free text"})
        assert response.json() == {"description": "", "content": "", "tech_stack": []}
