"""Tests for demo project seeding."""

import pytest

from alteran.db.seed import DEMO_PROJECTS, seed_demo_projects
from alteran.schemas.projects import ProjectCreate
from alteran.services.project_service import ProjectService

pytestmark = pytest.mark.unit


async def test_seeds_every_demo_project(session_factory):
    inserted = await seed_demo_projects()

    projects = await ProjectService(session_factory).list_projects()
    assert inserted == len(DEMO_PROJECTS)
    assert {p.slug for p in projects} == {d["slug"] for d in DEMO_PROJECTS}


async def test_seeding_twice_is_a_no_op(session_factory):
    await seed_demo_projects()
    assert await seed_demo_projects() == 0
    assert len(await ProjectService(session_factory).list_projects()) == len(DEMO_PROJECTS)


async def test_existing_slug_is_left_alone(session_factory):
    service = ProjectService(session_factory)
    slug = DEMO_PROJECTS[0]["slug"]
    mine = await service.create(ProjectCreate(title=slug.replace("-", " "), description="mine"))
    assert mine.slug == slug

    inserted = await seed_demo_projects()

    assert inserted == len(DEMO_PROJECTS) - 1
    assert (await service.get_by_slug(slug)).description == "mine"
