"""Read-only queries over the portfolio content tables.

``PortfolioRepository`` wraps session lifecycle: every method opens its
own ``AsyncSession`` so the chat pipeline can run several queries
concurrently without sharing a session between tasks.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from folio.core.chat.models import (
    BlogSummary,
    ProfileInfo,
    ProjectInfo,
    SkillInfo,
    WorkExperienceInfo,
)

from .converters import (
    blog_to_summary,
    profile_to_info,
    project_to_info,
    skill_to_info,
    work_experience_to_info,
)
from .models import Blog, Profile, Project, Skill, WorkExperience


class PortfolioRepository:
    """Queries backing the chat context categories."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._sf = session_factory

    async def get_public_profile(self) -> ProfileInfo | None:
        stmt = (
            select(Profile)
            .where(Profile.is_public.is_(True))
            .order_by(Profile.id)
            .limit(1)
        )
        async with self._sf() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
        return profile_to_info(row) if row is not None else None

    async def list_visible_skills(self) -> list[SkillInfo]:
        stmt = (
            select(Skill)
            .where(Skill.is_visible.is_(True))
            .order_by(Skill.display_order, Skill.name)
        )
        async with self._sf() as session:
            rows = (await session.execute(stmt)).scalars().all()
        return [skill_to_info(r) for r in rows]

    async def list_published_projects(self) -> list[ProjectInfo]:
        stmt = (
            select(Project)
            .where(Project.is_published.is_(True))
            .order_by(Project.display_order, Project.id)
        )
        async with self._sf() as session:
            rows = (await session.execute(stmt)).scalars().all()
        return [project_to_info(r) for r in rows]

    async def list_visible_work_experience(self) -> list[WorkExperienceInfo]:
        stmt = (
            select(WorkExperience)
            .where(WorkExperience.is_visible.is_(True))
            .order_by(WorkExperience.display_order, WorkExperience.id)
        )
        async with self._sf() as session:
            rows = (await session.execute(stmt)).scalars().all()
        return [work_experience_to_info(r) for r in rows]

    async def list_published_blogs(self) -> list[BlogSummary]:
        stmt = (
            select(Blog)
            .where(Blog.is_published.is_(True))
            .order_by(Blog.published_at.desc(), Blog.id.desc())
        )
        async with self._sf() as session:
            rows = (await session.execute(stmt)).scalars().all()
        return [blog_to_summary(r) for r in rows]
