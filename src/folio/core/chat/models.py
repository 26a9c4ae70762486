"""Domain models for the chat pipeline.

Read-only projections of the stored portfolio records, the per-request
``ChatContext`` assembled from them, and the transient values passed
between pipeline stages.  None of these are persisted.

``ChatContext`` fields are ``None`` when the category was not requested
and therefore not fetched; an empty list means "fetched, nothing
there".  Downstream stages must keep the two apart.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """Topic a visitor question is routed to."""

    PROFILE = "profile"
    SKILLS = "skills"
    PROJECTS = "projects"
    WORK_EXPERIENCE = "workExperience"
    BLOGS = "blogs"


class _Record(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ProfileInfo(_Record):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    country: str | None = None
    bio: str | None = None
    social_links: dict[str, str] = Field(default_factory=dict)


class SkillInfo(_Record):
    name: str
    category: str
    level: str


class ProjectInfo(_Record):
    title: str
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    github_url: str | None = None
    live_url: str | None = None
    featured: bool = False


class WorkExperienceInfo(_Record):
    company: str
    position: str
    is_current: bool = False
    description: str | None = None
    technologies: list[str] = Field(default_factory=list)
    start_date: datetime | None = None
    end_date: datetime | None = None


class BlogSummary(_Record):
    title: str
    description: str = ""
    slug: str
    tags: list[str] = Field(default_factory=list)


class ChatContext(_Record):
    """Structured facts fetched for one chat turn."""

    profile: ProfileInfo | None = None
    skills: list[SkillInfo] | None = None
    projects: list[ProjectInfo] | None = None
    work_experience: list[WorkExperienceInfo] | None = None
    blogs: list[BlogSummary] | None = None


class ConversationTurn(_Record):
    """One prior message of the visitor's conversation."""

    text: str
    is_user: bool


class ValidatedMessage(_Record):
    sanitized: str


class ChatOutcome(BaseModel):
    """Result of one orchestrated chat request."""

    success: bool
    status_code: int = 200
    reply: str | None = None
    error: str | None = None
    processing_time_ms: float | None = None
    direct: bool = False
