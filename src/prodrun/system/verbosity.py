"""
Output forwarding policy for child processes.

A child's standard output is only interesting when the user asked for more
than lifecycle logging; its standard error is also shown when stack traces
were requested, so failures printed there are not lost.
"""

import logging
from typing import Union

from ..models import LogLevel, StackTraceMode, VerbositySettings

# Anything more verbose than this level forwards the child's stdout.
FORWARD_THRESHOLD = LogLevel.LIFECYCLE


def should_forward_stdout(log_level: LogLevel) -> bool:
    return log_level.is_more_verbose_than(FORWARD_THRESHOLD)


def should_forward_stderr(log_level: LogLevel, stacktrace: StackTraceMode) -> bool:
    return (should_forward_stdout(log_level)
            or stacktrace is not StackTraceMode.INTERNAL_EXCEPTIONS)


def resolve_verbosity(log_level: LogLevel, stacktrace: StackTraceMode) -> VerbositySettings:
    """
    Derive the stream forwarding decisions for one run.

    Args:
        log_level: The ambient log level
        stacktrace: The stack-trace display mode

    Returns:
        VerbositySettings; ``forward_stderr`` is always true when
        ``forward_stdout`` is.
    """
    return VerbositySettings(
        forward_stdout=should_forward_stdout(log_level),
        forward_stderr=should_forward_stderr(log_level, stacktrace),
    )


def parse_log_level(value: Union[str, LogLevel]) -> LogLevel:
    """Look up a LogLevel by (case-insensitive) name."""
    if isinstance(value, LogLevel):
        return value
    try:
        return LogLevel[value.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level '{value}'. Expected one of {[l.name.lower() for l in LogLevel]}") from None


def parse_stacktrace_mode(value: Union[str, StackTraceMode]) -> StackTraceMode:
    """Look up a StackTraceMode by its config value ('internal', 'always', 'full')."""
    if isinstance(value, StackTraceMode):
        return value
    try:
        return StackTraceMode(value.lower())
    except ValueError:
        raise ValueError(f"Unknown stacktrace mode '{value}'. Expected one of {[m.value for m in StackTraceMode]}") from None


def logging_level_for(log_level: LogLevel) -> int:
    """The standard library logging level used to print our own messages."""
    if log_level is LogLevel.DEBUG:
        return logging.DEBUG
    if log_level in (LogLevel.INFO, LogLevel.LIFECYCLE):
        return logging.INFO
    if log_level is LogLevel.WARN:
        return logging.WARNING
    return logging.ERROR
