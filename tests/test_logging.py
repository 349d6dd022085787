"""
Tests for backend.utils.logging.
"""

import json
import logging
import sys

import pytest

from backend.utils.logging import JsonFormatter, build_handler, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    logging.disable(logging.CRITICAL)


def _record(msg="Technician created", exc_info=None):
    return logging.LogRecord(
        name="backend.services.technician_service",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestJsonFormatter:

    def test_single_json_line(self):
        line = JsonFormatter().format(_record())

        payload = json.loads(line)
        assert "\n" not in line
        assert payload["level"] == "warning"
        assert payload["name"] == "backend.services.technician_service"
        assert payload["msg"] == "Technician created"
        assert "err" not in payload

    def test_exception_is_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record(exc_info=sys.exc_info())

        payload = json.loads(JsonFormatter().format(record))

        assert "RuntimeError: boom" in payload["err"]


class TestConfigureLogging:

    def test_development_uses_pretty_format(self):
        handler = build_handler("development")

        assert not isinstance(handler.formatter, JsonFormatter)

    @pytest.mark.parametrize("environment", ["production", "staging", "testing"])
    def test_other_environments_are_structured(self, environment):
        assert isinstance(build_handler(environment).formatter, JsonFormatter)

    def test_enabled_sets_level_and_handler(self, restore_root_logger):
        configure_logging(level="warning", enabled=True, environment="production")

        assert restore_root_logger.level == logging.WARNING
        assert isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger("any").isEnabledFor(logging.WARNING)

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        configure_logging(level="chatty", enabled=True, environment="production")

        assert restore_root_logger.level == logging.INFO

    def test_disabled_emits_nothing(self, restore_root_logger):
        configure_logging(enabled=False)

        assert isinstance(restore_root_logger.handlers[0], logging.NullHandler)
        assert not logging.getLogger("any").isEnabledFor(logging.CRITICAL)
