"""
Log record formatting.

Records are rendered as

    [2026-10-19 12:34:56,789] [D] process started          [command:sleep 10] [pid:4242] [1234] [/app/process]

with the structured extra fields aligned after the message, followed by the
emitting process id and the logger name.
"""

import collections
import logging
import os
from typing import Any

from .colors import ColorManager
from .config import LogConfig
from .constants import LogConstants

EXTRA_ATTR = "__sexec__extra"


def _extra_fields(record: logging.LogRecord) -> list[tuple[str, Any]]:
    """Extra fields attached by Logger, sorted unless insertion order was given."""
    extra = getattr(record, EXTRA_ATTR, None)
    if not extra:
        return []
    keys = list(extra.keys())
    if not isinstance(extra, collections.OrderedDict):
        keys.sort()
    return [(key, extra[key]) for key in keys]


def _format_value(key: str, value: Any) -> str:
    if key == "exception" and isinstance(value, BaseException):
        return value.__class__.__name__
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


class LogFormatter(logging.Formatter):
    """
    Formatter for sexec loggers.

    Supports optional ANSI colors, microsecond timestamps and caller
    location, all driven by a LogConfig.
    """

    def __init__(self, config: LogConfig) -> None:
        super().__init__(LogConstants.DEFAULT_FORMAT)
        self._config = config

    @property
    def config(self) -> LogConfig:
        return self._config

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        """Format timestamp with optional microsecond precision."""
        s = super().formatTime(record, datefmt)
        if self._config.micros:
            micros = int((record.created % 1) * 1000000) % 1000
            s += f".{micros:03d}"
        return s

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        record.asctime = self.formatTime(record)

        head = f"[{record.asctime}] [{record.levelname[:1]}] {record.message}"
        rule = (
            LogConstants.MICRO_RULE_WIDTH
            if self._config.micros
            else LogConstants.DEFAULT_RULE_WIDTH
        )
        pad = " " * max(1, rule - len(head))

        fields = [f"[{k}:{_format_value(k, v)}]" for k, v in _extra_fields(record)]
        meta = [f"[{record.process}]", f"[{record.name}]"]
        if self._config.location > 0:
            meta.append(f"[{os.path.basename(record.pathname)}:{record.lineno}]")

        if self._config.colors:
            line = self._colorize(record, head, pad, fields, meta)
        else:
            line = head + pad + " ".join(fields + meta)

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            line += "\n" + record.exc_text
        return line

    def _colorize(
        self,
        record: logging.LogRecord,
        head: str,
        pad: str,
        fields: list[str],
        meta: list[str],
    ) -> str:
        col = ColorManager.for_level(record.levelno)
        gray = ColorManager.GRAY + "m"
        parts = [col + "m" + head[: head.index("] ") + 1]]
        parts.append(" " + ColorManager.bold(col) + head[head.index("] ") + 2 :])
        parts.append(ColorManager.RESET + pad)
        if fields:
            parts.append(col + "m" + " ".join(fields) + " ")
        parts.append(gray + " ".join(meta) + ColorManager.RESET)
        return "".join(parts)
