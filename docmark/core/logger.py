"""Logging setup for the docmark crawler.

Every module logs through ``logging.getLogger(__name__)``; records propagate
to the ``docmark`` package logger, which is wired once per process by the
API lifespan or the CLI through :func:`setup_logging`.

Console output goes to stderr so it never interleaves with the CLI's Rich
output on stdout. The rotating file keeps DEBUG records for post-mortems of
failed crawls.

Examples:
    >>> from docmark.core.config import Settings
    >>> from docmark.core.logger import setup_logging
    >>> logger = setup_logging(Settings(log_level="DEBUG"))
    >>> logger.info("Crawl started")
    2026-10-18 10:45:00,123 | INFO | docmark | Crawl started
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docmark.core.config import Settings

PACKAGE_LOGGER = "docmark"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_LOG_FILE = Path(".cache/docmark.log")

MAX_LOG_SIZE_BYTES = 100 * 1024 * 1024  # 100MB
BACKUP_COUNT = 5

# Handler names owned by get_logger; other handlers (pytest, uvicorn) are kept
CONSOLE_HANDLER_NAME = "docmark-console"
FILE_HANDLER_NAME = "docmark-file"
OWNED_HANDLERS = {CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME}


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(CONSOLE_HANDLER_NAME)
    # Console never gets chattier than INFO; DEBUG belongs in the file
    handler.setLevel(max(level, logging.INFO))
    handler.setFormatter(formatter)
    return handler


def _file_handler(log_file: Path, formatter: logging.Formatter) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_SIZE_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.set_name(FILE_HANDLER_NAME)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure a logger with a stderr console handler and a rotating file.

    Calling it again replaces the handlers it installed earlier and leaves
    any other handlers on the logger alone. If the log file cannot be opened
    (read-only working directory, for instance) the logger falls back to
    console output and says so, rather than failing the crawl.

    Args:
        name: Logger name, normally ``"docmark"``
        log_level: Level name; case-insensitive
        log_file: Rotating log file (default ``.cache/docmark.log``)

    Returns:
        The configured logger

    Raises:
        AttributeError: If log_level is not a valid logging level name.
    """
    level = getattr(logging, log_level.upper())
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for handler in [h for h in logger.handlers if h.get_name() in OWNED_HANDLERS]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    logger.addHandler(_console_handler(level, formatter))

    target = log_file or DEFAULT_LOG_FILE
    try:
        logger.addHandler(_file_handler(target, formatter))
    except OSError as exc:
        logger.warning(f"File logging disabled, cannot open {target}: {exc}")

    return logger


def setup_logging(settings: Settings) -> logging.Logger:
    """Wire the ``docmark`` package logger from settings.

    Args:
        settings: Settings providing ``log_level`` and ``log_file``

    Returns:
        The package logger
    """
    return get_logger(
        PACKAGE_LOGGER, log_level=settings.log_level, log_file=settings.log_file
    )
