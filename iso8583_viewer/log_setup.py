"""
Logging configuration for the command line and desktop front ends.

The decoder modules only create module loggers; handlers are attached here,
once, on the ``iso8583_viewer`` logger.
"""
import logging
import os
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "iso8583_viewer"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(level: Union[int, str] = logging.WARNING, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the package logger.

    Later calls update the level of every handler and attach a file handler
    for ``log_file`` when none writes there yet.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or number.
        log_file: Optional path of a UTF-8 log file written in addition to
            the console.
    """
    global _configured

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    if _configured and logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

    if log_file and not _has_file_handler(logger, log_file):
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    logger.propagate = False
    _configured = True
    return logger


def _has_file_handler(logger: logging.Logger, log_file: str) -> bool:
    target = os.path.abspath(log_file)
    return any(
        isinstance(h, logging.FileHandler) and h.baseFilename == target
        for h in logger.handlers
    )
