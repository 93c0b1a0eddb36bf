"""Logging configuration."""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "browser_runner"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Setup logger with consistent formatting.

    The handler is attached once, to the package root logger; module
    loggers propagate to it. Passing ``level`` sets it on the named logger
    only.

    Args:
        name: Logger name (usually __name__)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance.
    """
    root = logging.getLogger(PACKAGE_LOGGER)

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(logging.INFO)
        root.propagate = False

    logger = logging.getLogger(name)

    if level:
        logger.setLevel(getattr(logging, level.upper()))

    return logger


def set_log_level(level: str) -> None:
    """Apply a level from configuration to every package logger."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(getattr(logging, level.upper()))
