"""
Process supervisor.

A Process runs one shell command at a time as a child process and lets any
number of callers observe its completion. Each run owns a fresh completion
record: a single reaper thread waits for the child, decodes its exit status,
stores the code and then sets the record's gate. Every wait variant and status
query reads that one record, so completion is broadcast exactly once and seen
by waiters that arrive before or after it.

Example:
    proc = Process("sleep 10", stdout=subprocess.DEVNULL)
    proc.start()
    done = proc.wait_event()
    if not done.wait(timeout=1.0):
        proc.signal(signal.SIGTERM)
    proc.wait()  # 143
"""

from __future__ import annotations

import enum
import signal as signals
import subprocess
import threading
from typing import IO, TYPE_CHECKING, Any, Union

from .config import ProcessConfig
from .exceptions import (
    AlreadyRunningError,
    NotRunningError,
    NotStartedError,
    StillRunningError,
)
from .status import (
    GENERIC_FAILURE_CODE,
    OtherFailure,
    WaitOutcome,
    decode_exit_status,
    describe,
    outcome_from_returncode,
)

if TYPE_CHECKING:
    from .log import Logger

# Anything subprocess.Popen accepts for a standard stream
Stream = Union[None, int, IO[Any]]


class RunState(enum.Enum):
    """Phase of the current run."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    EXITED = "exited"


class _Completion:
    """
    One-shot completion record for a single run.

    The exit code is written before the running flag drops and before the
    gate is set; readers that observe either see the final code.
    """

    def __init__(self) -> None:
        self.exit_code = -1
        self.running = True
        self._gate = threading.Event()

    def close(self, exit_code: int) -> None:
        """Publish the exit code and release every waiter. Called once."""
        self.exit_code = exit_code
        self.running = False
        self._gate.set()

    def wait(self) -> int:
        self._gate.wait()
        return self.exit_code

    def relay(self, event: threading.Event) -> None:
        """Set event once the gate is set, without blocking the caller."""
        thread = threading.Thread(
            target=self._relay, args=(event,), name="sexec-relay", daemon=True
        )
        thread.start()

    def _relay(self, event: threading.Event) -> None:
        self._gate.wait()
        event.set()


class Process:
    """
    Supervisor for one shell command.

    The command runs through the configured shell (``/bin/bash -c`` by
    default), so pipes, redirections and expansions are honored. The three
    streams are passed to subprocess.Popen unchanged and never closed here.

    An instance can be reused for sequential runs; each start() replaces the
    completion record of the previous run.
    """

    def __init__(
        self,
        command: str,
        stdin: Stream = None,
        stdout: Stream = None,
        stderr: Stream = None,
        config: ProcessConfig | None = None,
        lg: Logger | None = None,
    ) -> None:
        """
        Initialize the supervisor.

        Args:
            command: Shell command line to execute
            stdin: Input source for the child (None inherits the caller's)
            stdout: Output sink for the child (None inherits the caller's)
            stderr: Error sink for the child (None inherits the caller's)
            config: Spawn settings (default: ProcessConfig())
            lg: Parent logger; lifecycle events go to its "process" child
        """
        self._command = command
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr
        self._config = config or ProcessConfig()
        self._lg: Logger | None = None
        if lg is not None:
            from .log import LoggerFactory

            self._lg = LoggerFactory.derive(lg, "process")
        self._popen: subprocess.Popen | None = None
        self._mon: _Completion | None = None
        self._start_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Process(command={self._command!r}, state={self.state.value})"

    @property
    def command(self) -> str:
        return self._command

    @property
    def config(self) -> ProcessConfig:
        return self._config

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """
        Start the command without waiting for it to complete.

        Raises:
            AlreadyRunningError: If the previous run has not completed
            OSError: If the child could not be spawned; the run is still
                finalized (exit code 1) so waiters never block
        """
        self._launch()

    def run(self) -> int:
        """
        Start the command and wait for it to complete.

        Returns:
            int: Decoded exit code

        Raises:
            AlreadyRunningError: If the previous run has not completed
            OSError: If the child could not be spawned
        """
        return self._launch().wait()

    def _launch(self) -> _Completion:
        with self._start_lock:
            if self._mon is not None and self._mon.running:
                raise AlreadyRunningError(command=self._command)
            return self._spawn()

    def _spawn(self) -> _Completion:
        mon = _Completion()
        self._mon = mon
        self._popen = None

        try:
            popen = subprocess.Popen(
                self._config.argv(self._command),
                stdin=self.stdin,
                stdout=self.stdout,
                stderr=self.stderr,
                env=self._config.environ(),
                cwd=self._config.cwd,
            )
        except Exception as e:
            mon.close(GENERIC_FAILURE_CODE)
            if self._lg:
                self._lg.error(
                    "failed to start process",
                    extra={"command": self._command, "exception": e},
                )
            raise

        self._popen = popen
        if self._lg:
            self._lg.debug(
                "process started", extra={"command": self._command, "pid": popen.pid}
            )

        reaper = threading.Thread(
            target=self._reap,
            args=(popen, mon),
            name=f"sexec-reaper-{popen.pid}",
            daemon=True,
        )
        reaper.start()
        return mon

    def _reap(self, popen: subprocess.Popen, mon: _Completion) -> None:
        """Wait for the child and close its completion record."""
        exit_code = GENERIC_FAILURE_CODE
        try:
            outcome = self._wait_outcome(popen)
            exit_code = decode_exit_status(outcome)
            if self._lg:
                self._lg.debug(
                    "process exited",
                    extra={
                        "pid": popen.pid,
                        "exit_code": exit_code,
                        "status": describe(outcome),
                    },
                )
        finally:
            mon.close(exit_code)

    def _wait_outcome(self, popen: subprocess.Popen) -> WaitOutcome:
        try:
            popen.wait()
        except OSError as e:
            if self._lg:
                self._lg.warning(
                    "wait for process failed", extra={"pid": popen.pid, "exception": e}
                )
            return OtherFailure(e)
        return outcome_from_returncode(popen.returncode)

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    def signal(self, sig: int | signals.Signals) -> None:
        """
        Send a signal to the process.

        Errors from the OS are raised unchanged. Signalling a process that
        has already exited is left to the OS.

        Raises:
            NotRunningError: If no process was ever spawned
        """
        popen = self._popen
        if popen is None:
            raise NotRunningError(command=self._command)
        if self._lg:
            self._lg.debug(
                "sending signal",
                extra={"pid": popen.pid, "signal": _signal_name(sig)},
            )
        popen.send_signal(sig)

    def pid(self) -> int:
        """
        PID of the process. Remains available after the process exits.

        Raises:
            NotRunningError: If no process was ever spawned
        """
        if self._mon is None or self._popen is None:
            raise NotRunningError(command=self._command)
        return self._popen.pid

    # -------------------------------------------------------------------------
    # Waiting
    # -------------------------------------------------------------------------

    def wait(self) -> int:
        """
        Wait for the current run to complete and return its exit code.

        Returns immediately, with the same code, once the run has completed.

        Raises:
            NotRunningError: If the process was never started
        """
        mon = self._mon
        if mon is None:
            raise NotRunningError(command=self._command)
        return mon.wait()

    def wait_event(self) -> threading.Event | None:
        """
        Return a new event that is set when the current run completes.

        Each call returns an independent event owned by the caller. Returns
        None if the process was never started.
        """
        mon = self._mon
        if mon is None:
            return None
        event = threading.Event()
        mon.relay(event)
        return event

    def wait_on_event(self, event: threading.Event) -> None:
        """
        Set the given event when the current run completes.

        Raises:
            NotRunningError: If the process was never started
            TypeError: If event is None
        """
        mon = self._mon
        if mon is None:
            raise NotRunningError(command=self._command)
        if event is None:
            raise TypeError("wait_on_event() requires an event, got None")
        mon.relay(event)

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    def exit_code(self) -> int:
        """
        Exit code of the completed run, without blocking.

        Raises:
            NotStartedError: If the process was never started
            StillRunningError: If the run has not completed yet
        """
        mon = self._mon
        if mon is None:
            raise NotStartedError(command=self._command)
        if mon.running:
            raise StillRunningError(command=self._command)
        return mon.exit_code

    @property
    def success(self) -> bool:
        """
        True iff the run completed with exit code 0.

        Never raises: not started, running and failed all read as False.
        """
        mon = self._mon
        if mon is None or mon.running:
            return False
        return mon.exit_code == 0

    @property
    def started(self) -> bool:
        """True iff the process has been started before."""
        return self._mon is not None

    @property
    def running(self) -> bool:
        """True iff the current run has not completed."""
        mon = self._mon
        return mon is not None and mon.running

    @property
    def exited(self) -> bool:
        """True iff the process was started and its current run has completed."""
        mon = self._mon
        return mon is not None and not mon.running

    @property
    def state(self) -> RunState:
        mon = self._mon
        if mon is None:
            return RunState.NOT_STARTED
        return RunState.RUNNING if mon.running else RunState.EXITED


def new_process(command: str, stdout: Stream = None, stderr: Stream = None) -> Process:
    """Create a Process reading from the null device, writing to the given sinks."""
    return Process(command, stdin=subprocess.DEVNULL, stdout=stdout, stderr=stderr)


def _signal_name(sig: int | signals.Signals) -> str:
    try:
        return signals.Signals(sig).name
    except ValueError:
        return str(sig)
