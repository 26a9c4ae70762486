"""Keyword router from a visitor question to context categories.

Rules are evaluated top to bottom and the first match wins, so a
question touching several topics ("what skills did you use in your
projects?") is routed to the earliest matching category only.
``classify_all`` returns every matching category for callers that
prefer breadth over prompt size.
"""

import re
from typing import NamedTuple

from .models import Category


class CategoryRule(NamedTuple):
    pattern: re.Pattern[str]
    category: Category


def _rule(pattern: str, category: Category) -> CategoryRule:
    return CategoryRule(re.compile(pattern), category)


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    _rule(r"\bname\b|\bwho are you\b", Category.PROFILE),
    _rule(r"\be-?mail\b|\bcontact", Category.PROFILE),
    _rule(r"\bphone\b|\bnumber\b", Category.PROFILE),
    _rule(r"\blocation\b|\bwhere\b.*\blive", Category.PROFILE),
    _rule(r"\bskills?\b|\btechnolog(y|ies)\b|\btech stack\b", Category.SKILLS),
    _rule(r"\bprojects?\b|\bportfolio\b", Category.PROJECTS),
    _rule(
        r"\bexperience\b|\bwork(ed|ing)?\b|\bcompan(y|ies)\b|\bjobs?\b",
        Category.WORK_EXPERIENCE,
    ),
    _rule(r"\bblogs?\b|\barticles?\b|\bposts?\b", Category.BLOGS),
)

DEFAULT_CATEGORY = Category.PROFILE


def classify(message: str) -> frozenset[Category]:
    """Return the single category of the first matching rule.

    Falls back to ``Category.PROFILE`` so basic identity data is always
    available.
    """
    lowered = message.lower()
    for rule in CATEGORY_RULES:
        if rule.pattern.search(lowered):
            return frozenset({rule.category})
    return frozenset({DEFAULT_CATEGORY})


def classify_all(message: str) -> frozenset[Category]:
    """Return every category with at least one matching rule."""
    lowered = message.lower()
    matched = {rule.category for rule in CATEGORY_RULES if rule.pattern.search(lowered)}
    return frozenset(matched or {DEFAULT_CATEGORY})
