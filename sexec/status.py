"""
Exit status decoding.

Converts the outcome of waiting on a child process into the single integer
exit code shells report: a normal exit yields its status (wrapped to 0-255),
a death by signal yields 128 + the signal number, and a wait that failed for
any other reason yields the generic failure code 1.

The outcome is modelled as a small tagged union so the decoding policy can be
tested without spawning anything:

    >>> decode_exit_status(NormalExit(113))
    113
    >>> decode_exit_status(SignaledDeath(signal.SIGTERM))
    143
    >>> decode_exit_status(OtherFailure(ChildProcessError()))
    1
"""

from __future__ import annotations

import os
import signal
from dataclasses import dataclass
from typing import Union

SIGNAL_EXIT_BASE = 128
GENERIC_FAILURE_CODE = 1
EXIT_STATUS_MASK = 0xFF


@dataclass(frozen=True)
class NormalExit:
    """The child called exit(code) or returned from main."""

    code: int


@dataclass(frozen=True)
class SignaledDeath:
    """The child was terminated by a signal."""

    signal: int


@dataclass(frozen=True)
class OtherFailure:
    """The wait itself failed, or the status could not be interpreted."""

    error: BaseException | None = None


WaitOutcome = Union[NormalExit, SignaledDeath, OtherFailure]


def decode_exit_status(outcome: WaitOutcome) -> int:
    """
    Decode a wait outcome into an exit code.

    Args:
        outcome: Result of waiting on a terminated child

    Returns:
        int: 128 + signal for signal deaths, the status masked to 0-255 for
        normal exits, GENERIC_FAILURE_CODE otherwise

    Raises:
        TypeError: If outcome is not a WaitOutcome variant
    """
    if isinstance(outcome, SignaledDeath):
        return SIGNAL_EXIT_BASE + int(outcome.signal)
    if isinstance(outcome, NormalExit):
        return int(outcome.code) & EXIT_STATUS_MASK
    if isinstance(outcome, OtherFailure):
        return GENERIC_FAILURE_CODE
    raise TypeError(f"unsupported wait outcome: {outcome!r}")


def outcome_from_returncode(returncode: int | None) -> WaitOutcome:
    """
    Build a wait outcome from a subprocess.Popen returncode.

    Popen reports a death by signal N as -N. A None returncode means the
    child was never reaped, which is treated as a failed wait.
    """
    if returncode is None:
        return OtherFailure()
    if returncode < 0:
        return SignaledDeath(-returncode)
    return NormalExit(returncode)


def outcome_from_wait_status(status: int) -> WaitOutcome:
    """
    Build a wait outcome from a raw os.waitpid() status word.

    Stopped or continued statuses do not describe a terminated child and map
    to OtherFailure.
    """
    if os.WIFSIGNALED(status):
        return SignaledDeath(os.WTERMSIG(status))
    if os.WIFEXITED(status):
        return NormalExit(os.WEXITSTATUS(status))
    return OtherFailure()


def describe(outcome: WaitOutcome) -> str:
    """Short human-readable description of an outcome, used in log records."""
    if isinstance(outcome, SignaledDeath):
        try:
            return f"killed by {signal.Signals(outcome.signal).name}"
        except ValueError:
            return f"killed by signal {outcome.signal}"
    if isinstance(outcome, NormalExit):
        return f"exited with {outcome.code}"
    if outcome.error is not None:
        return f"wait failed: {outcome.error}"
    return "wait failed"
