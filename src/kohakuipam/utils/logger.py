"""
Logging setup for KohakuIPAM based on loguru.

Usage:
    from kohakuipam.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Applied pool")

configure_logging() is called once by the CLI entry point. Until then loguru's
default stderr sink is used.
"""

import sys

from loguru import logger as _logger

from kohakuipam.models.enums import LogLevel

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

_LEVEL_MAP = {
    LogLevel.FULL: "TRACE",
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARNING",
}


def configure_logging(level: LogLevel = LogLevel.INFO, log_file: str = "") -> None:
    """
    Replace loguru sinks with KohakuIPAM's console (and optional file) sinks.

    Args:
        level: Verbosity level.
        log_file: Extra file sink path (empty = console only).
    """
    level = LogLevel(level)
    loguru_level = _LEVEL_MAP[level]
    full = level == LogLevel.FULL

    _logger.remove()
    _logger.configure(extra={"name": "kohakuipam"})
    _logger.add(
        sys.stderr,
        level=loguru_level,
        format=LOG_FORMAT,
        backtrace=full,
        diagnose=full,
    )
    if log_file:
        _logger.add(
            log_file,
            level=loguru_level,
            format=LOG_FORMAT,
            rotation="10 MB",
            backtrace=full,
            diagnose=full,
        )


def get_logger(name: str):
    """Get a logger bound to a module name."""
    return _logger.bind(name=name)
