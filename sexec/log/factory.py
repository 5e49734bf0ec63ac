"""
Factory for creating and configuring loggers.

Logger names are "/"-separated paths: the root logger is "/", and a logger
derived from it for the process supervisor is "/process".
"""

import collections
import logging
import sys
from typing import Any, TextIO, cast

from .config import LogConfig
from .formatters import LogFormatter
from .logger import Logger


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    @staticmethod
    def create_root(
        config: LogConfig,
        logger_class: type[Logger] = Logger,
        stream: TextIO | None = None,
    ) -> Logger:
        """
        Create a root logger with the specified configuration.

        Example:
            >>> config = LogConfig.from_params(level="info", colors=False)
            >>> lg = LoggerFactory.create_root(config)
            >>> lg.info("supervisor ready")
            [2026-10-19 12:34:56,789] [I] supervisor ready    [1234] [/]
        """
        return LoggerFactory.create("/", config, logger_class, stream=stream)

    @staticmethod
    def create(
        name: str,
        config: LogConfig,
        logger_class: type[Logger] = Logger,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
        stream: TextIO | None = None,
    ) -> Logger:
        """
        Create a logger with its own console handler.

        Returns the existing logger if one with this name was already created.

        Args:
            name: Logger name
            config: Logger configuration
            logger_class: Logger class to use
            extra: Pre-populated extra fields to include in all log records
            stream: Output stream for the handler (default: sys.stdout)
        """
        existing = LoggerFactory._check_existing_logger(name)
        if existing:
            return existing

        lg = logger_class(name, config, extra)

        handler = logging.StreamHandler(stream or sys.stdout)
        if config.level is not False:
            handler.setLevel(config.level)
        handler.setFormatter(LogFormatter(config))
        lg.addHandler(handler)
        lg.propagate = False
        lg.parent = logging.root

        logging.root.manager.loggerDict[name] = lg
        return lg

    @staticmethod
    def _check_existing_logger(name: str) -> Logger | None:
        """Return the existing sexec logger with this name, if any."""
        existing = logging.root.manager.loggerDict.get(name)
        if isinstance(existing, Logger):
            return cast(Logger, existing)
        return None

    @staticmethod
    def derive(
        parent: Logger,
        tags: str | list[str],
        extra: dict[str, Any] | None = None,
    ) -> Logger:
        """
        Derive a "view" logger that delegates to the root's handlers.

        Examples:
            >>> LoggerFactory.derive(root, "process").name
            '/process'
            >>> LoggerFactory.derive(root, ["jobs", "build"]).name
            '/jobs/build'

        Args:
            parent: Parent logger instance
            tags: Single tag string or list of tags forming the path
            extra: Extra fields added to the parent's for this view

        Returns:
            Derived logger instance
        """
        if isinstance(tags, str):
            tags = [tags]

        prefix = parent.name if parent.name == "/" else parent.name + "/"
        name = prefix + "/".join(tags)

        existing = LoggerFactory._check_existing_logger(name)
        if existing:
            return existing

        merged = parent.extra
        merged.update(extra or {})

        lg = parent.__class__(name, parent.config, merged)
        lg.setLevel(logging.NOTSET)
        lg._root_logger = parent._root_logger or parent
        lg.parent = parent
        lg.propagate = False

        logging.root.manager.loggerDict[name] = lg
        return lg
