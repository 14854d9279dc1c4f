# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Logging configuration for the orbitview namespace.
"""
import logging
import sys

LOGGER_NAME = "orbitview"


def setup_logging(level: int | str = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """
    Configure the 'orbitview' logger.

    Console output goes to stderr so stdout stays free for CLI results.

    Args:
        level: Logging level, as a number or a name such as "DEBUG".
        log_file: Optional path to also write logs to.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Re-running setup replaces handlers instead of duplicating output.
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S',
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
