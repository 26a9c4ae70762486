"""Startup wiring for folio's long-lived resources.

The app lifespan lists its resources (database engine, rate limiter
with its sweeper task, context cache) as ``Depends()`` parameters.
``inject`` resolves them once at startup with FastAPI's own dependency
solver, so a resource builder can depend on ``get_app``, on the config
or on another builder.  Teardown runs in reverse order at shutdown.

Adapted from https://github.com/fastapi/fastapi/discussions/11742
"""

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from functools import partial
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.dependencies.models import Dependant
from fastapi.dependencies.utils import get_dependant, solve_dependencies

logger = logging.getLogger(__name__)

_STARTUP_HEADERS = ((b"x-request-scope", b"lifespan"),)


def get_app(request: Request) -> FastAPI:
    """Resource builders take the app from here to publish on ``app.state``."""
    return request.app


def _startup_request(app: FastAPI) -> Request:
    """A request stand-in carrying only what resource builders read."""
    return Request(
        scope={
            "type": "http",
            "http_version": "1.1",
            "method": "GET",
            "scheme": "http",
            "path": "/",
            "raw_path": b"/",
            "query_string": b"",
            "root_path": "",
            "headers": _STARTUP_HEADERS,
            "client": ("localhost", 80),
            "server": ("localhost", 80),
            "state": app.state,
            "app": app,
        }
    )


def _resource_names(dependant: Dependant) -> list[str]:
    return [dep.name for dep in dependant.dependencies if dep.name]


def inject(
    lifespan: Callable[..., Any],
) -> Callable[[FastAPI], Any]:
    """Turn a lifespan with ``Depends()`` parameters into a plain lifespan.

    Usage::

        @inject
        async def lifespan(
            app: FastAPI,
            _db: Annotated[None, Depends(build_db)],
            _sweeper: Annotated[None, Depends(build_rate_limit_sweeper)],
        ):
            yield

    ``app.dependency_overrides`` is honoured, so tests can replace any
    resource builder.

    Raises:
        RuntimeError: at startup, when a parameter cannot be resolved.
    """

    @asynccontextmanager
    async def wrapper(app: FastAPI):  # type: ignore[misc]
        dependant = get_dependant(path="/", call=partial(lifespan, app))
        names = _resource_names(dependant)

        async with AsyncExitStack() as stack:
            solved = await solve_dependencies(
                request=_startup_request(app),
                dependant=dependant,
                async_exit_stack=stack,
                embed_body_fields=False,
                dependency_overrides_provider=app,
            )
            if solved.errors:
                raise RuntimeError(
                    f"Cannot resolve lifespan dependencies: {solved.errors}"
                )
            logger.info("Resources started: %s", ", ".join(names) or "none")
            async with asynccontextmanager(lifespan)(app, **solved.values):
                yield
            logger.info("Stopping resources: %s", ", ".join(reversed(names)))

    return wrapper
