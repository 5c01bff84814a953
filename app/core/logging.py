"""Logging helpers."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

LOGGER_NAME = "app"


def setup_logging(level: str | int = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """
    Configure the package logger once.

    Every module logs through `logging.getLogger(__name__)`, so all of them
    end up under the "app" logger configured here.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handler: logging.Handler = RotatingFileHandler(
                log_file, maxBytes=2_000_000, backupCount=3
            )
        else:
            handler = logging.StreamHandler()

        fmt = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(fmt)
        logger.addHandler(handler)

    return logger
