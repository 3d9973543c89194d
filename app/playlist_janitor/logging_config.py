"""
Logging configuration for Playlist Janitor.

The API, the cleanup scheduler and the CLI all log through the
`playlist_janitor` logger tree; third-party libraries are kept at WARNING.
"""

import logging
import os
import sys
from typing import Optional, TextIO


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

APP_LOGGER = "playlist_janitor"

# Chatty at INFO/DEBUG, only their warnings are of interest
NOISY_LOGGERS = ("apscheduler", "urllib3", "spotipy", "sqlalchemy.engine")


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure logging for the application.

    Args:
        level: Level for the playlist_janitor loggers (DEBUG, INFO, WARNING, ...).
            Unknown names fall back to INFO.
        log_file: Optional log file path; its directory is created if needed
        stream: Console stream, stdout when not given

    Returns:
        The application logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(_handler(logging.StreamHandler(stream or sys.stdout), log_level, formatter))

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        root_logger.addHandler(_handler(logging.FileHandler(log_file), log_level, formatter))

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    app_logger.info(f"Logging configured: level={logging.getLevelName(log_level)}, file={log_file or 'console only'}")
    return app_logger


def setup_logging_from_env() -> logging.Logger:
    """LOG_LEVEL and LOG_FILE from the environment."""
    return setup_logging(os.getenv("LOG_LEVEL", "INFO"), os.getenv("LOG_FILE") or None)
