"""Logging setup for the agent."""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(name: str = "rush_local", level: str | None = None) -> logging.Logger:
    """Configure the named logger with a single stderr handler.

    Stdout is left alone because action results are written there.
    Calling this twice does not add a second handler.
    """
    if level is None:
        level = os.getenv("RUSH_LOG_LEVEL", "INFO")
    resolved = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(resolved)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
