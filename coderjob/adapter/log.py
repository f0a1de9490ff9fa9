"""Logging configuration using loguru.

The CLI writes its results to stdout, so all log output goes to stderr.
Each ``-v`` raises the detail: one forces DEBUG for coderjob itself, two
also lets the httpx/httpcore request traces through.
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

_HTTP_LOGGERS = ("httpx", "httpcore")

_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
_DEBUG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class _InterceptHandler(logging.Handler):
    """Forward stdlib records (httpx, httpcore) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def resolve_level(level: str, verbosity: int = 0) -> str:
    """Effective loguru level for the configured ``level`` and ``-v`` count."""
    if verbosity > 0:
        return "DEBUG"
    return level.upper()


def setup_logging(level: str = "INFO", verbosity: int = 0) -> str:
    """Install a single stderr sink and return the effective level.

    ``level`` normally comes from ``CoderJobSettings.log_level``; ``verbosity``
    is the number of ``-v`` flags given on the command line.
    """
    effective = resolve_level(level, verbosity)

    logger.remove()
    logger.add(sys.stderr, level=effective, format=_DEBUG_FORMAT if effective == "DEBUG" else _FORMAT)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    # The gateway logs each call; raw transport traces only at -vv
    http_level = logging.DEBUG if verbosity >= 2 else logging.WARNING
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    logger.debug("Logging at {} (verbosity {})", effective, verbosity)
    return effective
