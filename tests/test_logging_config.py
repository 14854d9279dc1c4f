# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for logging setup."""
import logging

import pytest

from orbitview.logging_config import LOGGER_NAME, setup_logging


@pytest.fixture(autouse=True)
def _restore_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestSetupLogging:

    def test_level_by_name(self):
        logger = setup_logging("debug")
        assert logger.name == "orbitview"
        assert logger.level == logging.DEBUG

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging("chatty")

    def test_repeated_setup_does_not_duplicate(self):
        setup_logging(logging.INFO)
        logger = setup_logging(logging.INFO)
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        path = tmp_path / "orbitview.log"
        logger = setup_logging(logging.INFO, str(path))
        assert len(logger.handlers) == 2
        logging.getLogger("orbitview.domain.simulation").warning("tick failed")
        for handler in logger.handlers:
            handler.flush()
        assert "tick failed" in path.read_text()
