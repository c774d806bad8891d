"""Logging for url_spider.

Every module logs through the shared ``UrlSpider`` logger::

    from url_spider.logger import logger
    logger.info("Fetch <- %s", url)

Records go to stderr, so stdout stays free for the report location and the
crawl summary printed by the CLI. ``--log-file`` adds a rotating file handler.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "UrlSpider"
LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set up the crawler logger.

    Parameters
    ----------
    level
        Numeric or textual level; ``"DEBUG"`` also shows dequeues, skipped
        duplicates and dropped links.
    log_file
        Optional file receiving the same records, rotated by size.
    log_format
        Format string for :class:`logging.Formatter`.
    replace_handlers
        Drop handlers installed by a previous call before adding new ones.
    """
    formatter = logging.Formatter(log_format)
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    if replace_handlers:
        for old in list(lg.handlers):
            lg.removeHandler(old)
            old.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    lg.addHandler(console)

    if log_file is not None:
        file_handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        lg.addHandler(file_handler)

    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Used by the CLI group: fresh handlers with the requested level."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
