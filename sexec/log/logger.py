"""
Logger class for the logging system.

Extends the standard logger with pre-populated extra fields, a TRACE level,
a disabled mode, and "view" loggers that share their root's handlers.
"""

import collections
import logging
import sys
from typing import Any

from .config import LogConfig
from .constants import LogConstants
from .formatters import EXTRA_ATTR


class Logger(logging.Logger):
    """
    Enhanced logger with structured extra fields.

    Every record carries the merge of the logger's own extra fields and the
    per-call ``extra`` argument; LogFormatter renders them as [key:value].
    """

    def __init__(
        self,
        name: str,
        config: LogConfig | None = None,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
    ):
        """
        Initialize the logger.

        Args:
            name: Logger name
            config: Logger configuration (default: info level)
            extra: Pre-populated extra fields to include in all log records
        """
        if config is None:
            config = LogConfig.from_params("info")

        if config.level is False:
            super().__init__(name, logging.CRITICAL + 1)
            self._logging_disabled = True
        else:
            super().__init__(name, config.level)
            self._logging_disabled = False

        self._config = config
        self._extra = extra or {}
        self._root_logger: Logger | None = None  # Set for derived "view" loggers

    @property
    def config(self) -> LogConfig:
        return self._config

    @property
    def extra(self) -> dict[str, Any]:
        return dict(self._extra)

    @property
    def disabled(self) -> bool:  # type: ignore[override]
        """Check if logging is disabled."""
        return self._logging_disabled

    @disabled.setter
    def disabled(self, value: bool) -> None:
        self._logging_disabled = value

    def get_level(self) -> int | bool:
        """Get configured log level (False when disabled)."""
        return self._config.level

    def isEnabledFor(self, level: int) -> bool:
        """Check if enabled, respecting the parent view chain."""
        if self._logging_disabled:
            return False
        if not super().isEnabledFor(level):
            return False
        if isinstance(self.parent, Logger):
            return self.parent.isEnabledFor(level)
        return True

    def _merge_extra(
        self, extra: dict[str, Any] | collections.OrderedDict | None
    ) -> dict[str, Any] | collections.OrderedDict:
        """Merge pre-populated extra fields with per-call extra fields."""
        merged: dict[str, Any] | collections.OrderedDict
        if isinstance(self._extra, collections.OrderedDict) or isinstance(
            extra, collections.OrderedDict
        ):
            merged = collections.OrderedDict(self._extra)
        else:
            merged = self._extra.copy()
        if extra:
            merged.update(extra)
        return merged

    def makeRecord(
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: object,
        args: Any,
        exc_info: Any,
        func: str | None = None,
        extra: Any = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        """Create log record, attaching the merged extra fields."""
        merged_extra = self._merge_extra(extra)
        record = super().makeRecord(
            name, level, fn, lno, msg, args, exc_info, func=func, sinfo=sinfo
        )
        setattr(record, EXTRA_ATTR, merged_extra)
        return record

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a TRACE level message."""
        if self.isEnabledFor(LogConstants.TRACE):
            self._log(LogConstants.TRACE, msg, args, **kwargs)

    def _log(self, level: int, msg: Any, args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        if self._logging_disabled:
            return
        try:
            super()._log(level, msg, args, **kwargs)
        except (TypeError, ValueError) as e:
            # Format errors must not take the caller down with them
            sys.stderr.write(
                f"LOG_FORMAT_ERROR [{self.name}]: {e.__class__.__name__}: {e} "
                f"| msg={msg!r} args={args!r}\n"
            )

    def findCaller(
        self, stack_info: bool = False, stacklevel: int = 1
    ) -> tuple[str, int, str, str | None]:
        """Report the first frame outside the logging machinery."""
        f = logging.currentframe()
        while f is not None and f.f_code.co_filename in (logging.__file__, __file__):
            f = f.f_back
        if f is None:
            return "(unknown file)", 0, "(unknown function)", None
        return f.f_code.co_filename, f.f_lineno, f.f_code.co_name, None

    def callHandlers(self, record: logging.LogRecord) -> None:
        """
        Pass a record to all relevant handlers.

        Derived "view" loggers delegate to their root logger's handlers
        instead of holding their own.
        """
        if self._root_logger is not None:
            for handler in self._root_logger.handlers:
                if record.levelno >= handler.level:
                    handler.handle(record)
        else:
            super().callHandlers(record)
