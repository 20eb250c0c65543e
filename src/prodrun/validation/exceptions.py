"""
Exception types and error handling helpers.

This module defines the error taxonomy used across the run pipeline and the
shared helpers that log errors consistently before (optionally) re-raising them.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation of configuration input fails.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class ProdRunError(Exception):
    """
    Base class for every failure of the run pipeline.

    Subclasses set ``phase`` so callers can report which step of a run
    (command assembly, launch, run or teardown) failed.
    """

    phase = "run"


class ConfigurationError(ProdRunError):
    """Malformed process specification."""

    phase = "command assembly"


class ExecutionEnvironmentError(ProdRunError):
    """The host cannot run the command (missing directory, bad platform)."""

    phase = "launch"


class UnsupportedOperationError(ExecutionEnvironmentError):
    """A requested option is not available on the current platform."""


class LaunchError(ProdRunError):
    """The operating system failed to start a process."""

    phase = "launch"

    def __init__(self, message: str, command: Optional[list] = None):
        super().__init__(message)
        self.command = command


class CompanionFailure(ProdRunError):
    """The companion process exited non-zero or could not be stopped."""

    phase = "teardown"

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = exit_code


class TeardownError(ProdRunError):
    """Companion teardown failed after an otherwise successful run."""

    phase = "teardown"


class ProcessExitError(ProdRunError):
    """The primary process finished with a non-zero exit code."""

    phase = "run"

    def __init__(self, message: str, exit_code: int):
        super().__init__(message)
        self.exit_code = exit_code


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_subprocess_error(error: Exception, command: str, **kwargs) -> None:
    """Handle subprocess-related errors."""
    handle_error(error, f"subprocess command '{command}'", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log a CLI-level failure and exit the interpreter."""
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    if include_traceback:
        severity = ErrorSeverity.CRITICAL
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
