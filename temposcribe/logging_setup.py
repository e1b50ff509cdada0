"""
Central logging configuration for temposcribe.

The library itself only creates module loggers; applications embedding it call
``configure_logging`` once to get a colorized console handler and consistent
levels for the temposcribe loggers.
"""

import logging
import sys
from typing import Optional

from colorlog import ColoredFormatter

from .settings import TemposcribeSettings, get_settings

LOG_FORMAT = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

TEMPOSCRIBE_LOGGERS = [
    "temposcribe",
    "temposcribe.calendar.recurrence",
    "temposcribe.calendar.event_codec",
    "temposcribe.settings",
]


def configure_logging(
    debug_mode: bool = False,
    force_debug: Optional[bool] = None,
    settings: Optional[TemposcribeSettings] = None,
) -> None:
    """
    Configure console logging and temposcribe logger levels.

    Args:
        debug_mode: Whether to enable debug logging for temposcribe modules
        force_debug: Override debug mode setting (None to use settings.debug)
        settings: Settings to read ``debug`` and ``log_level`` from, the global
            settings when None

    Settings (and their environment variables):
        debug / TEMPOSCRIBE_DEBUG: Enable debug logging for temposcribe modules
        log_level / TEMPOSCRIBE_LOG_LEVEL: Override root and temposcribe log level
    """
    if settings is None:
        settings = get_settings()

    if force_debug is not None:
        final_debug = force_debug
    else:
        final_debug = debug_mode or settings.debug

    root_level = logging.DEBUG if final_debug else logging.INFO
    if settings.log_level:
        root_level = getattr(logging, settings.log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add a handler if none exist to avoid duplicate output
    if not root_logger.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S", log_colors=LOG_COLORS))
        root_logger.addHandler(handler)

    package_level = logging.DEBUG if final_debug else root_level
    for name in TEMPOSCRIBE_LOGGERS:
        logging.getLogger(name).setLevel(package_level)

    if final_debug:
        root_logger.debug("Debug logging enabled for temposcribe modules")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for name in TEMPOSCRIBE_LOGGERS:
        status[name] = logging.getLevelName(logging.getLogger(name).level)
    return status
