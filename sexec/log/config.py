"""
Configuration for the logging system.

LogConfig is immutable; loggers created from the same config format their
records identically.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .constants import LogConstants
from .exceptions import InvalidLogLevelError


def resolve_level(level: str | int | bool) -> int | bool:
    """
    Resolve a log level from a name, numeric value, or boolean.

    Args:
        level: Level name ("debug", "trace", ...), number, numeric string,
            False (or "false") to disable logging, True for the default level

    Returns:
        int | bool: Numeric level, or False when logging is disabled

    Raises:
        InvalidLogLevelError: If the level is unknown
    """
    if isinstance(level, bool):
        return logging.INFO if level else False
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        if level.isnumeric():
            return int(level)
        if level.lower() in LogConstants.LEVEL_NAMES:
            return LogConstants.LEVEL_NAMES[level.lower()]
    raise InvalidLogLevelError(level)


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable logger configuration.

    Attributes:
        level: Numeric level, or False to disable logging
        location: Show the caller's file and line after each record when > 0
        micros: Append microseconds to timestamps
        colors: Emit ANSI colors
    """

    level: int | bool = logging.INFO
    location: int = 0
    micros: bool = False
    colors: bool = True

    @classmethod
    def from_params(
        cls,
        level: str | int | bool,
        location: bool | int = 0,
        micros: bool = False,
        colors: bool = True,
    ) -> LogConfig:
        """
        Create LogConfig from individual parameters.

        Args:
            level: Log level (name, number, or False to disable logging)
            location: Location display level (bool or int)
            micros: Whether to show microsecond precision
            colors: Whether to enable colored output
        """
        resolved_location = (
            1 if location is True else (0 if location is False else int(location))
        )
        return cls(
            level=resolve_level(level),
            location=resolved_location,
            micros=bool(micros),
            colors=bool(colors),
        )

    @classmethod
    def from_config(
        cls, config_dict: Mapping[str, Any], section: str = "logging"
    ) -> LogConfig:
        """
        Create LogConfig from a configuration dictionary.

        Args:
            config_dict: Configuration dictionary (e.g., from load_config())
            section: Dotted configuration section (default: "logging")

        Example:
            config = load_config("etc/sexec.yaml")
            log_config = LogConfig.from_config(config)
        """
        current: Any = config_dict
        for part in section.split("."):
            if isinstance(current, Mapping) and part in current:
                current = current[part]
            else:
                current = {}
                break
        if not isinstance(current, Mapping):
            current = {}

        colors = current.get("colors", True)
        if isinstance(colors, Mapping):
            colors = colors.get("enabled", True)

        return cls.from_params(
            level=current.get("level", "info"),
            location=current.get("location", 0),
            micros=current.get("microseconds", current.get("micros", False)),
            colors=colors,
        )
