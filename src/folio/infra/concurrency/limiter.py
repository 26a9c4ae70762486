"""Per-client fixed-window rate limiter.

Each client key owns a ``RateLimitRecord``.  The first request of a
window creates the record with ``count=1``; subsequent requests inside
the window increment it until ``max_requests`` is reached, after which
requests are refused *without* incrementing.  Once ``now`` passes
``window_reset_at`` the next request starts a fresh window.

Expired records are harmless for correctness (``check`` replaces them
anyway); ``sweep`` only bounds memory and is driven by
``RateLimitSweeper``.

The map is guarded by a ``threading.Lock``: ``check`` is synchronous
and never awaits, so the lock is held only for a dictionary update.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import AsyncGenerator, Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from folio.configs.config import AppConfig, get_app_config
from folio.infra.lifespan import get_app

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 30
DEFAULT_WINDOW = timedelta(seconds=60)


@dataclass
class RateLimitRecord:
    """Request count of one client inside its current window."""

    count: int
    window_reset_at: float


class RateLimiter:
    """Fixed-window request counter keyed by client identifier."""

    def __init__(
        self,
        *,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window: timedelta = DEFAULT_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_requests = max_requests
        self._window = window.total_seconds()
        self._clock = clock
        self._records: dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window(self) -> timedelta:
        return timedelta(seconds=self._window)

    def check(self, client_key: str) -> bool:
        """Count a request for *client_key*; return ``False`` if refused."""
        now = self._clock()
        with self._lock:
            record = self._records.get(client_key)
            if record is None or now > record.window_reset_at:
                self._records[client_key] = RateLimitRecord(
                    count=1, window_reset_at=now + self._window
                )
                return True

            if record.count >= self._max_requests:
                return False

            record.count += 1
            return True

    def sweep(self) -> int:
        """Drop records whose window has passed.  Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [
                key
                for key, record in list(self._records.items())
                if now > record.window_reset_at
            ]
            for key in expired:
                del self._records[key]
        return len(expired)

    @property
    def tracked_clients(self) -> int:
        """Number of client records currently held."""
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_rate_limiter(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the process-wide ``RateLimiter`` and attach it to ``app.state``."""
    api = config.api
    limiter = RateLimiter(
        max_requests=api.chat_rate_limit_per_window,
        window=api.chat_rate_limit_window,
    )
    app.state.rate_limiter = limiter
    logger.info(
        "RateLimiter ready (max=%d per %s)",
        api.chat_rate_limit_per_window,
        api.chat_rate_limit_window,
    )
    yield
    limiter.clear()


# ---------------------------------------------------------------------------
# Per-request dependency
# ---------------------------------------------------------------------------


def get_rate_limiter(request: Request) -> RateLimiter:
    """Return the ``RateLimiter`` stored on ``app.state`` by the lifespan."""
    return request.app.state.rate_limiter
