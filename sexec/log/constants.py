"""
Constants for the logging system.

Format strings, column widths and the custom TRACE level used by sexec
loggers.
"""

import logging


class LogConstants:
    """Constants for the logging system."""

    DEFAULT_FORMAT: str = "[%(asctime)s] [%(levelname).1s] %(message)s"

    # Column where extra fields start
    DEFAULT_RULE_WIDTH: int = 70
    MICRO_RULE_WIDTH: int = 74

    TRACE: int = 5

    # Log level names for resolution
    LEVEL_NAMES: dict[str, int | bool] = {
        "trace": TRACE,
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
        "critical": logging.CRITICAL,
        "false": False,  # Disables all logging
    }

    RESET: str = "\x1b[0m"
