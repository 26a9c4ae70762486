"""Process-wide logging setup for folio.

``setup_logging`` installs a single stdout handler on the root logger
and on uvicorn's loggers.  Production output is one JSON object per
line tagged with the service name; ``json_output: false`` switches to
uvicorn's coloured formatter for local runs.  Chatty client libraries
(HTTP, LLM SDKs, SQL echo) are held at WARNING so request logs stay
readable.
"""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter
from uvicorn.logging import DefaultFormatter

from folio.configs.system import LoggingConfig

_JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_JSON_RENAMES = {"asctime": "timestamp", "levelname": "level", "name": "logger"}

_DEV_FORMAT = "%(levelprefix)s %(asctime)s %(name)s  %(message)s"
_DEV_DATEFMT = "%H:%M:%S"

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
_QUIET_LOGGERS = (
    "httpx",
    "httpcore",
    "openai",
    "google_genai",
    "langchain_google_genai",
    "sqlalchemy.engine",
)


def build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.json_output:
        return JsonFormatter(
            fmt=_JSON_FORMAT,
            rename_fields=_JSON_RENAMES,
            static_fields={"service": config.service_name},
        )
    return DefaultFormatter(fmt=_DEV_FORMAT, datefmt=_DEV_DATEFMT, use_colors=True)


def setup_logging(config: LoggingConfig | None = None) -> logging.Handler:
    """Configure logging once, before the app is built.  Returns the handler."""
    if config is None:
        config = LoggingConfig()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(config))

    root = logging.getLogger()
    root.setLevel(config.level.upper())
    root.handlers = [handler]

    for name in _UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.propagate = False

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
