"""Logging for teachreg.

One rotating log file plus an optional console stream, attached to the
``teachreg`` logger. Components log through ``get_logger("<component>")``.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from teachreg.config import Settings

LOG_FILE = "teachreg.log"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "teachreg"


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(settings: Settings | None = None, *, console: bool = True) -> logging.Logger:
    """Attach the service's handlers to the ``teachreg`` logger.

    Directory and level come from `settings` (``TEACHREG_LOG_DIR`` and
    ``TEACHREG_LOG_LEVEL`` when built from the environment). Calling it
    again replaces the previous handlers.

    Returns:
        The ``teachreg`` logger.
    """
    if settings is None:
        settings = Settings.from_env()

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    log_path = Path(settings.log_dir) / LOG_FILE
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    _reset_handlers(logger)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(
        "Logging to %s at %s (database: %s)",
        log_path,
        logging.getLevelName(level),
        settings.database_url,
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the ``teachreg.<name>`` logger for a component."""
    if not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def truncate_output(output: str, max_length: int = 200) -> str:
    """Shorten free text (notification bodies) before it goes into a log line."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"... [truncated, {len(output) - max_length} more chars]"
