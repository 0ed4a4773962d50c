"""Logging configuration for cubeburst hosts."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "WARNING",
    log_file: Path | None = None,
    console: bool = True,
) -> logging.Logger:
    """
    Set up the ``cubeburst`` logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a rotating log file
        console: Attach a stderr handler (the terminal host turns this off
            because stderr would tear its screen)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("cubeburst")
    log_level = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(log_level)

    formatter = logging.Formatter(LOG_FORMAT)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=1048576,  # 1MB
            backupCount=3,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not logger.handlers:
        # Keep warnings off the terminal when neither sink is wanted
        logger.addHandler(logging.NullHandler())
    logger.propagate = False

    return logger
