"""ANSI color selection for log levels."""

import logging

from .constants import LogConstants


class ColorManager:
    """Centralized ANSI color code management."""

    RED = "\x1b[31"
    GREEN = "\x1b[32"
    YELLOW = "\x1b[33"
    MAGENTA = "\x1b[35"
    CYAN = "\x1b[36"
    DEFAULT = "\x1b[38"
    GRAY = "\x1b[38;5;240"

    RESET = LogConstants.RESET

    COLORS: dict[int, str] = {
        LogConstants.TRACE: GRAY,
        logging.DEBUG: "\x1b[38;5;32",
        logging.INFO: CYAN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: MAGENTA,
    }

    @staticmethod
    def for_level(level: int) -> str:
        """Color escape prefix for a level, without the trailing 'm'."""
        return ColorManager.COLORS.get(level, ColorManager.DEFAULT)

    @staticmethod
    def bold(color: str) -> str:
        """Bold variant of a color prefix, terminated."""
        return color + ";1m"
