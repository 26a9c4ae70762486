"""Converters from ORM rows to chat domain records.

Rows are mapped field by field into the frozen pydantic records of
``folio.core.chat.models``; anything outside those shapes is dropped
here so loosely typed JSON columns never reach the pipeline.
"""

from typing import Any

from folio.core.chat.models import (
    BlogSummary,
    ProfileInfo,
    ProjectInfo,
    SkillInfo,
    WorkExperienceInfo,
)

from .models import Blog, Profile, Project, Skill, WorkExperience


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


def _link_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items() if v}


def profile_to_info(row: Profile) -> ProfileInfo:
    return ProfileInfo(
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        phone=row.phone,
        city=row.city,
        country=row.country,
        bio=row.bio,
        social_links=_link_map(row.social_links),
    )


def skill_to_info(row: Skill) -> SkillInfo:
    return SkillInfo(name=row.name, category=row.category, level=row.level)


def project_to_info(row: Project) -> ProjectInfo:
    return ProjectInfo(
        title=row.title,
        description=row.description or "",
        technologies=_str_list(row.technologies),
        github_url=row.github_url,
        live_url=row.live_url,
        featured=row.featured,
    )


def work_experience_to_info(row: WorkExperience) -> WorkExperienceInfo:
    return WorkExperienceInfo(
        company=row.company,
        position=row.position,
        is_current=row.is_current,
        description=row.description,
        technologies=_str_list(row.technologies),
        start_date=row.start_date,
        end_date=row.end_date,
    )


def blog_to_summary(row: Blog) -> BlogSummary:
    return BlogSummary(
        title=row.title,
        description=row.description or "",
        slug=row.slug,
        tags=_str_list(row.tags),
    )
