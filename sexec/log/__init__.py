"""
Structured logging for sexec.

Extends Python's standard logging with:
- A custom TRACE level below DEBUG
- Pre-populated and per-call extra fields rendered as [key:value]
- Colored console output and optional microsecond timestamps
- "/"-separated logger paths with derived view loggers
- Complete disabling via level=False or "false"
"""

import logging
from typing import TextIO

from .config import LogConfig, resolve_level
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .factory import LoggerFactory
from .formatters import LogFormatter
from .logger import Logger

logging.addLevelName(LogConstants.TRACE, "TRACE")


def create_root_lg(
    level: str | int | bool = "info",
    location: bool | int = False,
    micros: bool = False,
    colors: bool = True,
    stream: TextIO | None = None,
) -> Logger:
    """
    Create a root logger with the specified configuration.

    Example:
        >>> lg = create_root_lg("debug", colors=False)
    """
    config = LogConfig.from_params(level, location, micros, colors)
    return LoggerFactory.create_root(config, stream=stream)


def derive_lg(lg: Logger, tags: str | list[str]) -> Logger:
    """
    Derive a logger with tags from a parent logger.

    Example:
        >>> child_lg = derive_lg(create_root_lg("info"), "process")
    """
    return LoggerFactory.derive(lg, tags)


__all__ = [
    "Logger",
    "LoggerFactory",
    "LogConfig",
    "LogConstants",
    "LogFormatter",
    "LogError",
    "InvalidLogLevelError",
    "resolve_level",
    "create_root_lg",
    "derive_lg",
]
