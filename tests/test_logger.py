# File: tests/test_logger.py
"""Tests for the project logger configuration."""
import logging
from logging.handlers import RotatingFileHandler

import pytest

from page_scout.logger import configure, init_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    configure()


def test_default_configuration_logs_to_stderr():
    lg = configure()
    assert lg.name == "PageScout"
    assert lg.level == logging.WARNING
    assert not lg.propagate
    assert len(lg.handlers) == 1
    assert type(lg.handlers[0]) is logging.StreamHandler


def test_log_file_gets_records(tmp_path):
    log_file = tmp_path / "scout.log"
    lg = init_logging(level="DEBUG", log_file=log_file, log_format="%(levelname)s %(message)s")
    assert any(isinstance(h, RotatingFileHandler) for h in lg.handlers)

    lg.debug("Scanning JSON-LD blocks")
    for handler in lg.handlers:
        handler.flush()
    assert "DEBUG Scanning JSON-LD blocks" in log_file.read_text(encoding="utf-8")


def test_append_handlers():
    configure()
    lg = configure(replace_handlers=False)
    assert len(lg.handlers) == 2
    lg = configure()
    assert len(lg.handlers) == 1
