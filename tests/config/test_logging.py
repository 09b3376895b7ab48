"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from reqkey.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    reqkey_logger = logging.getLogger("reqkey")
    reqkey_level = reqkey_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    reqkey_logger.setLevel(reqkey_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("reqkey").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("reqkey").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("reqkey.test")
        log.warning("json test", answer=42)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "reqkey.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("reqkey.services.registry").debug("Loaded 3 new key(s)")

        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "Loaded 3 new key(s)"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "reqkey.services.registry"

    def test_debug_hidden_when_not_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("reqkey.services.keys").debug("noise")
        assert capfd.readouterr().err == ""

    def test_sqlalchemy_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("sqlalchemy.engine").debug("SELECT 1")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1
