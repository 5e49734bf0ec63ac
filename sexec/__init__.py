from importlib.metadata import PackageNotFoundError, version

from .config import ProcessConfig, load_config
from .exceptions import (
    AlreadyRunningError,
    ConfigError,
    NotRunningError,
    NotStartedError,
    ProcessError,
    SexecError,
    StillRunningError,
)
from .process import Process, RunState, new_process
from .status import (
    GENERIC_FAILURE_CODE,
    SIGNAL_EXIT_BASE,
    NormalExit,
    OtherFailure,
    SignaledDeath,
    WaitOutcome,
    decode_exit_status,
    outcome_from_returncode,
    outcome_from_wait_status,
)

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("sexec")
except PackageNotFoundError:
    # Package not installed, use fallback (development mode)
    __version__ = "0.1.0-dev"

# Explicit public API
__all__ = [
    # Version
    "__version__",
    # Supervisor
    "Process",
    "RunState",
    "new_process",
    # Configuration
    "ProcessConfig",
    "load_config",
    # Exit status decoding
    "NormalExit",
    "SignaledDeath",
    "OtherFailure",
    "WaitOutcome",
    "decode_exit_status",
    "outcome_from_returncode",
    "outcome_from_wait_status",
    "SIGNAL_EXIT_BASE",
    "GENERIC_FAILURE_CODE",
    # Exceptions
    "SexecError",
    "ProcessError",
    "NotStartedError",
    "NotRunningError",
    "StillRunningError",
    "AlreadyRunningError",
    "ConfigError",
]
