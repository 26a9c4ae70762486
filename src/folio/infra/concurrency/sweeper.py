"""Background task that purges expired rate-limit records.

``RateLimitSweeper`` owns an ``asyncio.Task`` that calls
``RateLimiter.sweep`` on a fixed interval.  ``build_rate_limit_sweeper``
is a lifespan dependency that starts the task on startup and cancels it
on shutdown.  Tests call ``tick`` (or ``RateLimiter.sweep``) directly.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI

from folio.configs.config import AppConfig, get_app_config
from folio.infra.lifespan import get_app

from .limiter import RateLimiter, build_rate_limiter

logger = logging.getLogger(__name__)


class RateLimitSweeper:
    """Manages the sweep loop lifecycle."""

    def __init__(self, limiter: RateLimiter, interval: float) -> None:
        self._limiter = limiter
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(
            self._loop(), name="rate-limit-sweeper"
        )
        logger.info("Rate-limit sweeper started (interval=%.0fs)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Rate-limit sweeper stopped.")

    def tick(self) -> int:
        removed = self._limiter.sweep()
        if removed:
            logger.debug("Swept %d expired rate-limit record(s)", removed)
        return removed

    # -- internal ----------------------------------------------------

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.tick()
            except Exception:
                logger.exception("Rate-limit sweep failed")


# ------------------------------------------------------------------
# Lifespan dependency
# ------------------------------------------------------------------


async def build_rate_limit_sweeper(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
    _limiter: Annotated[None, Depends(build_rate_limiter)],
) -> AsyncGenerator[None, None]:
    """Start the sweeper for ``app.state.rate_limiter``; stop on shutdown."""
    sweeper = RateLimitSweeper(
        limiter=app.state.rate_limiter,
        interval=config.api.rate_limit_sweep_interval.total_seconds(),
    )
    app.state.rate_limit_sweeper = sweeper
    await sweeper.start()
    yield
    await sweeper.stop()
