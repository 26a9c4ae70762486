"""Async SQL infrastructure (engine builder, ORM models, repository)."""

from .engine import build_db, get_portfolio_repository, get_session_factory
from .models import Base, Blog, Profile, Project, Skill, WorkExperience
from .repository import PortfolioRepository

__all__ = [
    "Base",
    "Blog",
    "PortfolioRepository",
    "Profile",
    "Project",
    "Skill",
    "WorkExperience",
    "build_db",
    "get_portfolio_repository",
    "get_session_factory",
]
