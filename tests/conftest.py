"""Shared fixtures for the chat pipeline tests."""

import pytest

from fakes import FakeClock
from folio.core.chat.models import (
    BlogSummary,
    ProfileInfo,
    ProjectInfo,
    SkillInfo,
    WorkExperienceInfo,
)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ada_profile() -> ProfileInfo:
    return ProfileInfo(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        phone="+44 20 7946 0000",
        city="London",
        country="United Kingdom",
        bio="I write programs for the Analytical Engine.",
        social_links={"github": "https://github.com/ada"},
    )


@pytest.fixture
def sample_skills() -> list[SkillInfo]:
    return [
        SkillInfo(name="Python", category="backend", level="advanced"),
        SkillInfo(name="React", category="frontend", level="expert"),
        SkillInfo(name="Go", category="backend", level="expert"),
        SkillInfo(name="Rust", category="backend", level="learning"),
    ]


@pytest.fixture
def sample_projects() -> list[ProjectInfo]:
    return [
        ProjectInfo(
            title=f"Project {n}",
            description=f"Description of project {n}",
            technologies=["Python", "FastAPI"],
            github_url=f"https://github.com/ada/project-{n}",
        )
        for n in range(1, 8)
    ]


@pytest.fixture
def sample_experience() -> list[WorkExperienceInfo]:
    return [
        WorkExperienceInfo(
            company=f"Company {n}",
            position="Engineer",
            is_current=n == 1,
            technologies=["Go"],
        )
        for n in range(1, 5)
    ]


@pytest.fixture
def sample_blogs() -> list[BlogSummary]:
    return [
        BlogSummary(
            title=f"Post {n}",
            description="Notes",
            slug=f"post-{n}",
            tags=["python"],
        )
        for n in range(1, 6)
    ]
