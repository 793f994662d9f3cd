"""
Logging setup for runtimecfg.

All modules log through loguru. Call configure_logging() once at startup
to install the stderr sink; stdout stays reserved for command output.

Usage:
    from runtimecfg.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Chosen Node IP 10.0.0.5")
"""

import sys

from loguru import logger as _logger

from runtimecfg.models.enums import LogLevel

# =============================================================================
# Level Mapping
# =============================================================================

_LEVEL_MAP = {
    LogLevel.FULL: "TRACE",
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARNING",
}

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)


# =============================================================================
# Public API
# =============================================================================


def configure_logging(level: LogLevel = LogLevel.INFO, log_file: str = "") -> None:
    """
    Replace loguru's default handler with runtimecfg sinks.

    Args:
        level: Verbosity level. FULL also enables loguru's backtrace and
            variable diagnostics.
        log_file: Optional file to log to in addition to stderr.
    """
    loguru_level = _LEVEL_MAP.get(level, "INFO")
    full = level == LogLevel.FULL

    _logger.remove()
    _logger.add(
        sys.stderr,
        level=loguru_level,
        format=_FORMAT,
        backtrace=full,
        diagnose=full,
    )
    if log_file:
        _logger.add(log_file, level=loguru_level, format=_FORMAT, colorize=False)


def get_logger(name: str):
    """Return a loguru logger bound to the given module name."""
    return _logger.bind(name=name)
