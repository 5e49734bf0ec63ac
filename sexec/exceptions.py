"""
Exception hierarchy for the process supervisor.

All errors raised on purpose by sexec derive from SexecError, so callers can
catch every library error with a single except clause. OS-level failures from
spawning or signalling a child are not wrapped: they surface as the original
OSError subclass.
"""

from typing import Any


class SexecError(Exception):
    """
    Base exception for all sexec errors.

    Example:
        try:
            code = proc.exit_code()
        except SexecError as e:
            lg.error(f"process query failed: {e}")
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ProcessError(SexecError):
    """
    Process state errors.

    Raised when an operation is not valid for the supervisor's current run
    state. Each subclass carries a fixed default message so callers can
    compare by type rather than by text.
    """

    default_message = "process error"

    def __init__(self, message: str | None = None, **context: Any) -> None:
        super().__init__(message or self.default_message, **context)


class NotStartedError(ProcessError):
    """Raised when a status query is made before any start()/run()."""

    default_message = "process not started"


class NotRunningError(ProcessError):
    """Raised when an operation needs a process record the supervisor does not have."""

    default_message = "process not running"


class StillRunningError(ProcessError):
    """Raised by non-blocking status probes before the run has completed."""

    default_message = "process still running"


class AlreadyRunningError(ProcessError):
    """Raised when starting a supervisor whose previous run has not completed."""

    default_message = "process already running"


class ConfigError(SexecError):
    """
    Configuration-related errors.

    Examples:
        - Config file not found or unreadable
        - Invalid YAML syntax
        - Setting with the wrong type
    """

    pass
