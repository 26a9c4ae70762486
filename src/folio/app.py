"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI

from folio.api.chat import router as chat_router
from folio.api.exceptions import register_exception_handlers
from folio.api.models import HealthResponse
from folio.configs.config import get_app_config
from folio.core.chat.deps import build_context_cache
from folio.core.metrics import instrument_app
from folio.infra.concurrency.sweeper import build_rate_limit_sweeper
from folio.infra.db.engine import build_db
from folio.infra.lifespan import inject
from folio.infra.logging import setup_logging

logger = logging.getLogger(__name__)


@inject
async def lifespan(
    app: FastAPI,
    _db: Annotated[None, Depends(build_db)],
    _sweeper: Annotated[None, Depends(build_rate_limit_sweeper)],
    _context_cache: Annotated[None, Depends(build_context_cache)],
) -> AsyncGenerator[None, None]:
    """Startup and shutdown are owned by the injected dependencies."""
    logger.info("Folio chat service started")
    yield
    logger.info("Folio chat service stopping")


def get_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_app_config()
    setup_logging(config.logging)

    app = FastAPI(
        title="Folio",
        description="Portfolio chat assistant answering questions about the site owner",
        version="0.1.0",
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    instrument_app(app)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse()

    app.include_router(chat_router)

    return app


app = get_app()
