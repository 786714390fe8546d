"""Tests for logging setup."""

from __future__ import annotations

import logging

import pytest

from malware_sim.logging_config import setup_logging


@pytest.fixture
def restore_loggers():
    pkg = logging.getLogger("malware_sim")
    werkzeug = logging.getLogger("werkzeug")
    saved = (pkg.level, list(pkg.handlers), werkzeug.level)
    yield
    for handler in list(pkg.handlers):
        pkg.removeHandler(handler)
        handler.close()
    pkg.setLevel(saved[0])
    for handler in saved[1]:
        pkg.addHandler(handler)
    werkzeug.setLevel(saved[2])


class TestSetupLogging:
    def test_quiets_request_logging(self, restore_loggers):
        logging.getLogger("werkzeug").setLevel(logging.NOTSET)
        setup_logging(logging.DEBUG)
        assert logging.getLogger("werkzeug").level == logging.WARNING

    def test_repeat_calls_keep_one_handler(self, restore_loggers):
        setup_logging()
        logger = setup_logging(logging.DEBUG)
        assert logger.name == "malware_sim"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_log_file(self, restore_loggers, tmp_path):
        path = tmp_path / "sim.log"
        logger = setup_logging(log_file=str(path))
        logging.getLogger("malware_sim.simulation.engine").info("hello from engine")
        for handler in logger.handlers:
            handler.flush()
        assert len(logger.handlers) == 2
        assert "hello from engine" in path.read_text(encoding="utf-8")

    def test_custom_quiet_loggers(self, restore_loggers):
        noisy = logging.getLogger("dash.noisy")
        noisy.setLevel(logging.NOTSET)
        setup_logging(quiet_loggers=["dash.noisy"])
        assert noisy.level == logging.WARNING
        noisy.setLevel(logging.NOTSET)
