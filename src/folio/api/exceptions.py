"""Global exception handlers.

Registered by the application factory: Starlette snapshots the handler
table when it builds the middleware stack, which happens before the
lifespan runs.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from folio.core.chat.service import INTERNAL_ERROR

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on ``app``."""

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": INTERNAL_ERROR},
        )
