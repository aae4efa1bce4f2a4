#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/logging_utils.py
"""Logging setup for the minimd command line tool.

Only the ``minimd`` package logger is configured. Handlers that belong to a
host application, on the root logger or elsewhere, are left alone, so
``minimd.cli.main()`` can be called in-process.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER_NAME = "minimd"

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed here, so a second call replaces only those
_HANDLER_MARKER = "_minimd_handler"


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    return level if isinstance(level, int) else logging.INFO


def _install(logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)


def remove_handlers(logger: Optional[logging.Logger] = None) -> None:
    """Close and remove the handlers installed by :func:`configure_logging`."""
    logger = logger or logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_MARKER, False)]:
        logger.removeHandler(handler)
        handler.close()


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Send minimd's log records to stderr, and optionally to a file.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "INFO"). Unknown names
        mean INFO.
    log_file : str, optional
        Path of a file that receives a copy of every record. If the file
        cannot be opened a warning is logged and only stderr is used.
    trace_mode : bool, default False
        When true, records carry a timestamp and the emitting module.

    Returns
    -------
    logging.Logger
        The ``minimd`` package logger. Its records no longer propagate to
        the root logger.

    """
    level = _resolve_level(log_level)
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    remove_handlers(logger)
    logger.setLevel(level)
    logger.propagate = False

    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(CONSOLE_FORMAT)

    _install(logger, logging.StreamHandler(sys.stderr), level, formatter)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            _install(logger, file_handler, level, formatter)
            logger.debug("Logging to file: %s", log_file)

    return logger
