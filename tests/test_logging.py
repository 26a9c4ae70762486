"""Tests for the logging setup."""

import json
import logging

import pytest
from uvicorn.logging import DefaultFormatter

from folio.configs.system import LoggingConfig
from folio.infra.logging import build_formatter, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    saved = (root.handlers[:], root.level)
    uvicorn = logging.getLogger("uvicorn")
    saved_uvicorn = (uvicorn.handlers[:], uvicorn.propagate)
    yield
    root.handlers, root.level = saved[0], saved[1]
    uvicorn.handlers, uvicorn.propagate = saved_uvicorn


def _record(msg: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="folio.core.chat.service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestFormatter:
    def test_json_line_fields(self):
        formatter = build_formatter(LoggingConfig(service_name="folio-test"))
        line = json.loads(formatter.format(_record("chat handled")))
        assert line["message"] == "chat handled"
        assert line["level"] == "INFO"
        assert line["logger"] == "folio.core.chat.service"
        assert line["service"] == "folio-test"
        assert "timestamp" in line

    def test_dev_output_uses_uvicorn_formatter(self):
        formatter = build_formatter(LoggingConfig(json_output=False))
        assert isinstance(formatter, DefaultFormatter)


class TestSetupLogging:
    def test_single_handler_shared_with_uvicorn(self, restore_logging):
        handler = setup_logging(LoggingConfig(level="debug"))

        root = logging.getLogger()
        assert root.handlers == [handler]
        assert root.level == logging.DEBUG
        uvicorn = logging.getLogger("uvicorn")
        assert uvicorn.handlers == [handler]
        assert not uvicorn.propagate

    def test_client_libraries_quieted(self, restore_logging):
        setup_logging()
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
