"""Category-scoped context fetching.

``ContextProvider.fetch`` queries only the requested categories,
concurrently, under a single timeout.  Categories that were not
requested stay ``None`` on the returned ``ChatContext``.

An optional per-category TTL cache sits in front of the storage
collaborator.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from datetime import timedelta
from typing import Any, Protocol

from pydantic import ValidationError

from .exceptions import ContextFetchError
from .models import (
    BlogSummary,
    Category,
    ChatContext,
    ProfileInfo,
    ProjectInfo,
    SkillInfo,
    WorkExperienceInfo,
)

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT = timedelta(seconds=5)
DEFAULT_CACHE_TTL = timedelta(minutes=5)


class ContextSource(Protocol):
    """Read-only storage queries the provider depends on."""

    async def get_public_profile(self) -> ProfileInfo | None: ...

    async def list_visible_skills(self) -> list[SkillInfo]: ...

    async def list_published_projects(self) -> list[ProjectInfo]: ...

    async def list_visible_work_experience(self) -> list[WorkExperienceInfo]: ...

    async def list_published_blogs(self) -> list[BlogSummary]: ...


# Category -> (ChatContext field, source method name)
_CATEGORY_QUERIES: dict[Category, tuple[str, str]] = {
    Category.PROFILE: ("profile", "get_public_profile"),
    Category.SKILLS: ("skills", "list_visible_skills"),
    Category.PROJECTS: ("projects", "list_published_projects"),
    Category.WORK_EXPERIENCE: ("work_experience", "list_visible_work_experience"),
    Category.BLOGS: ("blogs", "list_published_blogs"),
}


class ContextCache:
    """In-process TTL cache keyed by category."""

    def __init__(
        self,
        ttl: timedelta = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl.total_seconds()
        self._clock = clock
        self._entries: dict[Category, tuple[float, Any]] = {}

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    def get(self, category: Category) -> tuple[bool, Any]:
        """Return ``(hit, value)``; expired entries are evicted."""
        if not self.enabled:
            return False, None
        entry = self._entries.get(category)
        if entry is None:
            return False, None
        expires_at, value = entry
        if self._clock() >= expires_at:
            self._entries.pop(category, None)
            return False, None
        return True, value

    def put(self, category: Category, value: Any) -> None:
        # A missing profile is not cached so a newly created one shows up.
        if self.enabled and value is not None:
            self._entries[category] = (self._clock() + self._ttl, value)

    def clear(self) -> None:
        self._entries.clear()


class ContextProvider:
    """Fetch the structured context for a set of categories."""

    def __init__(
        self,
        source: ContextSource,
        *,
        timeout: timedelta = DEFAULT_FETCH_TIMEOUT,
        cache: ContextCache | None = None,
    ) -> None:
        self._source = source
        self._timeout = timeout.total_seconds()
        self._cache = cache

    async def fetch(self, categories: Iterable[Category]) -> ChatContext:
        """Load only the requested categories.

        Raises:
            ContextFetchError: when storage fails or the fetch times out.
        """
        requested = set(categories)
        wanted = [c for c in _CATEGORY_QUERIES if c in requested]
        if not wanted:
            return ChatContext()

        try:
            values = await asyncio.wait_for(
                asyncio.gather(*(self._load(c) for c in wanted)),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ContextFetchError(
                f"Context fetch timed out after {self._timeout:.1f}s"
            ) from exc
        except Exception as exc:
            raise ContextFetchError(f"Context fetch failed: {exc}") from exc

        fields = {
            _CATEGORY_QUERIES[category][0]: value
            for category, value in zip(wanted, values)
        }
        try:
            ctx = ChatContext(**fields)
        except ValidationError as exc:
            raise ContextFetchError(f"Unexpected context shape: {exc}") from exc
        logger.debug("Fetched context for %s", [c.value for c in wanted])
        return ctx

    async def _load(self, category: Category) -> Any:
        if self._cache is not None:
            hit, value = self._cache.get(category)
            if hit:
                return value

        query: Callable[[], Awaitable[Any]] = getattr(
            self._source, _CATEGORY_QUERIES[category][1]
        )
        value = await query()
        if self._cache is not None:
            self._cache.put(category, value)
        return value
