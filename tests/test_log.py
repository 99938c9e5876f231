"""Tests for kelp.log — environment-driven log verbosity."""

import logging

import pytest

from kelp.log import configure_logging


@pytest.fixture
def kelp_logger():
    logger = logging.getLogger("kelp")
    handlers, level = list(logger.handlers), logger.level
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestConfigureLogging:
    def test_development_is_verbose(self, kelp_logger) -> None:
        configure_logging("development")
        assert kelp_logger.level == logging.INFO

    def test_production_only_warns(self, kelp_logger) -> None:
        configure_logging("production")
        assert kelp_logger.level == logging.WARNING

    def test_installs_one_handler(self, kelp_logger) -> None:
        configure_logging("development")
        configure_logging("production")
        assert len(kelp_logger.handlers) == 1
        assert kelp_logger.handlers[0].formatter._fmt == "KELP: %(message)s"

    def test_keeps_existing_handlers(self, kelp_logger) -> None:
        custom = logging.NullHandler()
        kelp_logger.addHandler(custom)
        configure_logging("development")
        assert kelp_logger.handlers == [custom]
