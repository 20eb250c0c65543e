"""
Companion (capture) process supervision.

The companion is an auxiliary profiler started before the primary process and
stopped after it. Stopping first gives the companion time to save its capture
and exit on its own, then forces it down, along with anything it left running
in its process group. Its output is drained into the log by two tasks that
are joined when the companion stops.
"""

import logging
import os
import subprocess
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, IO, List, Optional

import psutil

from ..models import CompanionConfig, CompanionState, CompanionStatus, ExecutionResult
from ..validation import (
    CompanionFailure,
    ErrorSeverity,
    LaunchError,
    TeardownError,
    handle_error,
)
from .constants import TimeoutConstants

logger = logging.getLogger(__name__)

# The companion only ever listens on the local loopback interface.
LOOPBACK_ADDRESS = "127.0.0.1"


def build_companion_command(config: CompanionConfig) -> List[str]:
    """
    Command line of the capture tool: bind address, overwrite, output file.
    """
    if config.executable is None:
        raise LaunchError("No companion executable configured")
    return [
        str(Path(config.executable).absolute()),
        "-a", LOOPBACK_ADDRESS,
        "-f",
        "-o", str(Path(config.output).absolute()),
    ]


def _drain_stream(stream: IO[str], consume: Callable[[str], None]) -> int:
    """Forward every line of ``stream`` to ``consume`` until it closes."""
    count = 0
    try:
        for line in stream:
            consume(line.rstrip("\r\n"))
            count += 1
    except (OSError, ValueError) as e:
        # Expected when the pipe is torn down with the process.
        logger.debug(f"Companion stream closed while draining: {e}")
    return count


def _is_process_alive(process: psutil.Process) -> bool:
    """Zombies count as terminated."""
    try:
        return process.is_running() and process.status() not in (
            psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD
        )
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return False


def _process_group_members(pgid: int) -> List[psutil.Process]:
    """Processes whose process group is ``pgid`` (POSIX only)."""
    if os.name != "posix":
        return []

    members = []
    for proc in psutil.process_iter():
        try:
            if os.getpgid(proc.pid) == pgid:
                members.append(proc)
        except (ProcessLookupError, PermissionError):
            continue
    return members


def _terminate_processes(processes: List[psutil.Process],
                         timeout: float = TimeoutConstants.TERMINATION_FORCE_TIMEOUT) -> None:
    """Send SIGTERM, wait up to ``timeout`` and SIGKILL whatever is still alive."""
    for proc in processes:
        try:
            proc.terminate()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue

    deadline = time.monotonic() + timeout
    alive = [p for p in processes if _is_process_alive(p)]
    while alive and time.monotonic() < deadline:
        psutil.wait_procs(alive, timeout=TimeoutConstants.LEFTOVER_POLL_INTERVAL)
        alive = [p for p in alive if _is_process_alive(p)]

    for proc in alive:
        logger.warning(f"Process {proc.pid} ignored termination, killing it")
        try:
            proc.kill()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue


class CompanionHandle:
    """
    A live companion process and the two tasks draining its output.

    The handle owns the process exclusively until ``close`` is called.
    """

    def __init__(self, process: subprocess.Popen, sink: logging.Logger):
        self.process = process
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="CompanionLog")
        self._drains: List[Future] = [
            self._executor.submit(_drain_stream, process.stdout, sink.info),
            self._executor.submit(_drain_stream, process.stderr, sink.error),
        ]

    @property
    def pid(self) -> int:
        return self.process.pid

    def is_alive(self) -> bool:
        return self.process.poll() is None

    def wait_for_exit(self, max_wait_seconds: int, poll_interval: float) -> bool:
        """
        Poll liveness once per interval for up to ``max_wait_seconds`` polls.

        Returns:
            True if the process exited on its own
        """
        for _ in range(max_wait_seconds):
            if not self.is_alive():
                break
            time.sleep(poll_interval)
        return not self.is_alive()

    def force_terminate(self) -> None:
        """Terminate the companion and its descendants, killing survivors."""
        try:
            children = psutil.Process(self.pid).children(recursive=True)
        except psutil.NoSuchProcess:
            children = []

        self.process.terminate()
        try:
            self.process.wait(timeout=TimeoutConstants.TERMINATION_FORCE_TIMEOUT)
        except subprocess.TimeoutExpired:
            logger.warning(f"Companion (PID: {self.pid}) ignored termination, killing it")
            self.process.kill()

        _terminate_processes(children)

    def terminate_leftovers(self) -> int:
        """
        Terminate processes the companion left behind in its process group.

        A leftover process may still hold the companion's output pipes, which
        keeps the drain tasks from ever seeing end of file.

        Returns:
            Number of leftover processes found
        """
        leftovers = [p for p in _process_group_members(self.pid) if _is_process_alive(p)]
        if leftovers:
            logger.warning(f"Terminating {len(leftovers)} process(es) left behind by the capture")
            _terminate_processes(leftovers)
        return len(leftovers)

    def close(self) -> None:
        """Join the drain tasks and release the pipes."""
        _, pending = wait(self._drains, timeout=TimeoutConstants.DRAIN_JOIN_TIMEOUT)
        if pending:
            # Closing a pipe mid-read would block on the reader's lock.
            logger.warning(f"{len(pending)} companion log drain task(s) did not finish")
        self._executor.shutdown(wait=not pending)

        for stream in (self.process.stdout, self.process.stderr):
            if stream is not None and not pending:
                stream.close()


class CompanionProcessSupervisor:
    """
    Drives one companion through Idle -> Running -> Stopped.

    A supervisor handles a single companion per orchestrated run; it is not
    reusable once stopped.
    """

    def __init__(self, sink: Optional[logging.Logger] = None,
                 poll_interval: float = TimeoutConstants.SHUTDOWN_POLL_INTERVAL):
        self.sink = sink or logger
        self.poll_interval = poll_interval
        self.state = CompanionState.IDLE
        self.status: Optional[CompanionStatus] = None
        self.failure: Optional[CompanionFailure] = None
        self._config: Optional[CompanionConfig] = None
        self._handle: Optional[CompanionHandle] = None

    @property
    def handle(self) -> Optional[CompanionHandle]:
        return self._handle

    def start(self, config: CompanionConfig) -> CompanionHandle:
        """
        Launch the companion and begin draining its output.

        Raises:
            RuntimeError: If this supervisor was already started
            LaunchError: If the executable cannot be started
        """
        if self.state is not CompanionState.IDLE:
            raise RuntimeError(f"Companion already started (state: {self.state.value})")

        self.state = CompanionState.STARTING
        self._config = config

        try:
            command = build_companion_command(config)
        except LaunchError:
            self.state = CompanionState.STOPPED_WITH_ERROR
            raise

        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                bufsize=1,
                # Own process group, so leftovers can be found after it exits
                start_new_session=os.name == "posix",
            )
        except OSError as e:
            self.state = CompanionState.STOPPED_WITH_ERROR
            raise LaunchError(f"Failed to start capture '{config.executable}': {e}", command=command) from e

        self._handle = CompanionHandle(process, self.sink)
        self.state = CompanionState.RUNNING
        logger.info(f"Capture started with PID: {process.pid}, writing to {config.output}")
        return self._handle

    def stop(self) -> CompanionStatus:
        """
        Wait for the companion to exit, forcing it down after the grace period.

        Returns:
            CompanionStatus of a clean stop

        Raises:
            RuntimeError: If the companion is not running
            CompanionFailure: If it exited non-zero or could not be stopped
        """
        if self.state is not CompanionState.RUNNING:
            raise RuntimeError(f"Cannot stop companion in state {self.state.value}")

        self.state = CompanionState.STOPPING
        handle = self._handle
        forced = False

        try:
            if not handle.wait_for_exit(self._config.max_shutdown_wait_seconds, self.poll_interval):
                logger.error("Capture did not stop on its own, killing it")
                handle.force_terminate()
                forced = True
            exit_code = handle.process.wait()
        except Exception as e:
            self._mark_failed(CompanionFailure(f"Error while stopping capture: {e}"), forced)
            raise self.failure from e
        finally:
            try:
                handle.terminate_leftovers()
            finally:
                handle.close()
            self._handle = None

        if exit_code != 0:
            self._mark_failed(
                CompanionFailure(f"Capture failed with exit code {exit_code}", exit_code=exit_code),
                forced,
                exit_code,
            )
            raise self.failure

        self.state = CompanionState.STOPPED
        self.status = CompanionStatus(state=self.state, exit_code=exit_code, forced=forced)
        logger.info("Capture stopped")
        return self.status

    def session(self, config: Optional[CompanionConfig]) -> "CompanionSession":
        """Scope a companion around a block of code; see CompanionSession."""
        return CompanionSession(self, config)

    def _mark_failed(self, failure: CompanionFailure, forced: bool,
                     exit_code: Optional[int] = None) -> None:
        self.state = CompanionState.STOPPED_WITH_ERROR
        self.failure = failure
        self.status = CompanionStatus(state=self.state, exit_code=exit_code, forced=forced)


class CompanionSession:
    """
    Keeps a companion running for the duration of a ``with`` block.

    On exit the companion is always stopped. A teardown failure after a
    successful block raises TeardownError; after a failed block (an exception,
    or a result recorded as non-normal) it is only logged so the primary
    failure is what the caller sees.
    """

    def __init__(self, supervisor: CompanionProcessSupervisor,
                 config: Optional[CompanionConfig]):
        self.supervisor = supervisor
        self.config = config
        self._primary_ok = True

    @property
    def active(self) -> bool:
        return self.config is not None and self.config.enabled

    def record_result(self, result: ExecutionResult) -> None:
        self._primary_ok = result.normal

    def __enter__(self) -> "CompanionSession":
        if self.active:
            self.supervisor.start(self.config)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if not self.active:
            return False

        primary_failed = exc_type is not None or not self._primary_ok
        try:
            self.supervisor.stop()
        except Exception as e:
            if primary_failed:
                handle_error(
                    error=e,
                    context="stopping capture after a failed run",
                    severity=ErrorSeverity.WARNING,
                    reraise=False,
                    logger=logger,
                )
                return False
            raise TeardownError(f"Failed to stop capture: {e}") from e
        return False
