"""Deterministic answers for common factual questions.

Each resolver only answers from fields actually present on the
``ChatContext``; a missing field is a miss, never an empty answer, and
the pipeline falls through to the LLM.  Resolvers run in a fixed
precedence order and the first non-``None`` answer wins.
"""

from collections.abc import Callable

from .models import ChatContext

MAX_LISTED_PROJECTS = 5

# Known proficiency levels, strongest first.  Other levels follow in
# first-seen order.
SKILL_LEVEL_ORDER = ("expert", "advanced", "intermediate", "beginner")

_TRAILING_PUNCTUATION = " ?!.,;:"


def _answer_name(msg: str, ctx: ChatContext) -> str | None:
    asks = msg.rstrip(_TRAILING_PUNCTUATION) == "name" or (
        "your name" in msg or "who are you" in msg
    )
    profile = ctx.profile
    if asks and profile and profile.first_name and profile.last_name:
        return f"{profile.first_name} {profile.last_name}"
    return None


def _answer_email(msg: str, ctx: ChatContext) -> str | None:
    if ("email" in msg or "contact" in msg) and ctx.profile and ctx.profile.email:
        return ctx.profile.email
    return None


def _answer_phone(msg: str, ctx: ChatContext) -> str | None:
    if ("phone" in msg or "number" in msg) and ctx.profile and ctx.profile.phone:
        return ctx.profile.phone
    return None


def _answer_location(msg: str, ctx: ChatContext) -> str | None:
    asks = "location" in msg or ("where" in msg and "live" in msg)
    profile = ctx.profile
    if not (asks and profile):
        return None
    parts = [p for p in (profile.city, profile.country) if p]
    return ", ".join(parts) or None


def _answer_projects(msg: str, ctx: ChatContext) -> str | None:
    asks = ("projects" in msg and "list" in msg) or msg.rstrip(
        _TRAILING_PUNCTUATION
    ) == "projects"
    if not (asks and ctx.projects):
        return None
    return ". ".join(
        f"{n}. {project.title}"
        for n, project in enumerate(ctx.projects[:MAX_LISTED_PROJECTS], start=1)
    )


def _answer_skills(msg: str, ctx: ChatContext) -> str | None:
    asks = "skills" in msg or "technologies" in msg or "tech stack" in msg
    if not (asks and ctx.skills):
        return None

    by_level: dict[str, list[str]] = {}
    for skill in ctx.skills:
        by_level.setdefault(skill.level, []).append(skill.name)

    known = [lvl for lvl in SKILL_LEVEL_ORDER if lvl in by_level]
    others = [lvl for lvl in by_level if lvl not in SKILL_LEVEL_ORDER]
    return ". ".join(
        f"I'm {level} in {', '.join(by_level[level])}" for level in known + others
    )


DIRECT_RESOLVERS: tuple[Callable[[str, ChatContext], str | None], ...] = (
    _answer_name,
    _answer_email,
    _answer_phone,
    _answer_location,
    _answer_projects,
    _answer_skills,
)


def resolve_direct_answer(message: str, ctx: ChatContext) -> str | None:
    """Answer *message* straight from *ctx*, or return ``None``."""
    lowered = message.lower().strip()
    for resolver in DIRECT_RESOLVERS:
        answer = resolver(lowered, ctx)
        if answer is not None:
            return answer
    return None
