"""Idempotent demo data for local development."""

import json

import structlog
from sqlalchemy import select

from alteran.db.base import get_session_factory
from alteran.db.models.project import Project

logger = structlog.get_logger(__name__)

DEMO_PROJECTS = [
    {
        "slug": "alteran-portfolio",
        "title": "alteran.tech: Portfolio",
        "description": (
            "Personal portfolio site with a glass-panel UI, an admin panel, GitHub repo import "
            "and AI-generated project descriptions via OpenRouter."
        ),
        "content": (
            "## Overview\n\n"
            "A portfolio website with a deep-space palette, glass panels and subtle glow effects.\n\n"
            "## Key Features\n\n"
            "- **Admin Panel** behind a signed session cookie\n"
            "- **GitHub Integration**: import projects straight from public repositories\n"
            "- **AI Generation**: stream project descriptions from an LLM\n"
            "- **Page cache** with on-demand revalidation after every edit\n"
        ),
        "tech_stack": ["Python", "FastAPI", "SQLAlchemy", "SQLite", "Jinja2", "OpenRouter"],
        "category": "web",
        "featured": True,
        "sort_order": 0,
        "status": "published",
        "source": "manual",
        "live_url": "https://alteran.tech",
        "source_url": "https://github.com/igorgerasimov/alteran.tech",
        "github_language": "Python",
        "github_stars": 12,
        "github_topics": ["portfolio", "fastapi", "python"],
    },
    {
        "slug": "neural-dashboard",
        "title": "Neural Dashboard",
        "description": (
            "Real-time analytics dashboard for ML inference metrics: throughput, latency "
            "percentiles and error rates across distributed nodes."
        ),
        "content": (
            "## Overview\n\n"
            "Neural Dashboard aggregates telemetry from distributed inference nodes.\n\n"
            "## Key Features\n\n"
            "- **WebSocket streams** for live metric ingestion\n"
            "- **Time-series charts** with rolling windows (1m / 5m / 1h / 24h)\n"
            "- **Alert rules** with webhook delivery\n"
        ),
        "tech_stack": ["React", "Rust", "WebSocket", "D3.js", "PostgreSQL", "Docker"],
        "category": "web",
        "featured": True,
        "sort_order": 1,
        "status": "published",
        "source": "manual",
        "source_url": "https://github.com/igorgerasimov/neural-dashboard",
        "github_language": "Rust",
        "github_stars": 47,
        "github_topics": ["rust", "websocket", "monitoring", "machine-learning"],
    },
    {
        "slug": "codex-cli",
        "title": "Codex CLI",
        "description": "Command-line tool that generates boilerplate code from annotated schemas.",
        "content": (
            "## Overview\n\n"
            "Define a data model once in YAML and generate typed boilerplate for each target.\n\n"
            "## Usage\n\n"
            "```bash\ncodex generate --schema api.yaml --target typescript --out ./src/generated\n```\n"
        ),
        "tech_stack": ["Go", "WASM", "YAML", "TypeScript", "Rust"],
        "category": "tool",
        "featured": False,
        "sort_order": 2,
        "status": "published",
        "source": "github",
        "source_url": "https://github.com/igorgerasimov/codex-cli",
        "github_owner": "igorgerasimov",
        "github_repo": "codex-cli",
        "github_language": "Go",
        "github_stars": 89,
        "github_topics": ["cli", "codegen", "go", "wasm"],
    },
]


async def seed_demo_projects() -> int:
    """Insert demo projects whose slug does not exist yet. Returns the number inserted."""
    factory = get_session_factory()
    inserted = 0

    async with factory() as session:
        for data in DEMO_PROJECTS:
            result = await session.execute(select(Project.id).where(Project.slug == data["slug"]))
            if result.scalar_one_or_none() is not None:
                continue

            values = dict(data)
            values["tech_stack"] = json.dumps(values["tech_stack"])
            values["github_topics"] = json.dumps(values["github_topics"])
            session.add(Project(**values))
            inserted += 1

        await session.commit()

    logger.info("demo_projects_seeded", inserted=inserted, skipped=len(DEMO_PROJECTS) - inserted)
    return inserted
