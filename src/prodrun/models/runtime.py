"""
Runtime data models.

This module contains data structures derived while a run is being prepared
or executed: verbosity decisions, the sectioned command line and the
companion lifecycle states.
"""

import os
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


class OsFamily(Enum):
    """Host operating system families that change how commands are built."""

    LINUX = "linux"
    MACOS = "macos"
    OTHER = "other"


class LogLevel(Enum):
    """
    Ambient log levels, ordered from most to least verbose.

    ``LIFECYCLE`` is the default threshold: anything more verbose forwards
    the child's standard output.
    """

    DEBUG = 0
    INFO = 1
    LIFECYCLE = 2
    WARN = 3
    QUIET = 4
    ERROR = 5

    def is_more_verbose_than(self, other: "LogLevel") -> bool:
        return self.value < other.value


class StackTraceMode(Enum):
    """How much of a stack trace the user asked to see."""

    INTERNAL_EXCEPTIONS = "internal"
    ALWAYS = "always"
    ALWAYS_FULL = "full"


@dataclass(frozen=True)
class VerbositySettings:
    """Per-run decision on forwarding the child's output streams."""

    forward_stdout: bool
    forward_stderr: bool


class CompanionState(Enum):
    """Lifecycle states of the companion capture process."""

    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    STOPPED_WITH_ERROR = "stopped_with_error"

    @property
    def is_terminal(self) -> bool:
        return self in (CompanionState.STOPPED, CompanionState.STOPPED_WITH_ERROR)


@dataclass(frozen=True)
class CommandLine:
    """
    A command line kept in sections so decorators can edit the right part.

    ``to_argv`` flattens it as: wrapper, executable, runtime flags,
    ``-cp <classpath>``, main class, program arguments.
    """

    executable: str
    runtime_flags: Tuple[str, ...] = ()
    classpath: Tuple[Path, ...] = ()
    main_class: str = ""
    program_args: Tuple[str, ...] = ()
    wrapper: Tuple[str, ...] = ()

    def with_wrapper(self, *wrapper: str) -> "CommandLine":
        return replace(self, wrapper=tuple(wrapper))

    def with_runtime_flag(self, flag: str) -> "CommandLine":
        return replace(self, runtime_flags=self.runtime_flags + (flag,))

    def classpath_string(self, separator: str = os.pathsep) -> str:
        return separator.join(str(entry.absolute()) for entry in self.classpath)

    def to_argv(self, separator: str = os.pathsep) -> List[str]:
        argv = list(self.wrapper)
        argv.append(self.executable)
        argv.extend(self.runtime_flags)
        if self.classpath:
            argv.extend(["-cp", self.classpath_string(separator)])
        if self.main_class:
            argv.append(self.main_class)
        argv.extend(self.program_args)
        return argv


@dataclass
class CompanionStatus:
    """Outcome of a companion teardown, kept for diagnostics."""

    state: CompanionState
    exit_code: Optional[int] = None
    forced: bool = False
