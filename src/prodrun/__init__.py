"""
prodrun: production run launcher with companion capture supervision.

This package launches a game client, dedicated server or external tool with
an assembled command line, optionally runs a profiler capture process next to
it, and decides from the ambient log level whether the child's output is shown.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Data structures and type definitions
- validation: Error taxonomy, input validation and error handling
- system: Command assembly, verbosity policy, platform decoration, toolchain lookup
- execution: Process runner, companion supervisor and per-role spec builders
- orchestration: Composition of a complete run
- cli: Command-line interface

Usage:
    From command line:
        prodrun run client

    Programmatically:
        from prodrun import LogLevel, ProcessSpec, RunOrchestrator, StackTraceMode, resolve_verbosity
        orchestrator = RunOrchestrator(resolve_verbosity(LogLevel.INFO, StackTraceMode.ALWAYS))
        result = orchestrator.execute(ProcessSpec("/bin/echo", program_args=("hello",)))
"""

# Main interfaces
from .config import get_config, clear_config_cache, set_config_path
from .orchestration import RunOrchestrator
from .cli import main_cli

# Model classes for external use
from .models import (
    AppConfig,
    CompanionConfig,
    ExecutionResult,
    LogLevel,
    OsFamily,
    ProcessSpec,
    RunProfile,
    RunRole,
    StackTraceMode,
    VerbositySettings,
)

# Execution components
from .execution import CompanionProcessSupervisor, ProcessRunner, build_process_spec

# System utilities
from .system import build_command, decorate_command, resolve_verbosity

# Errors
from .validation import (
    CompanionFailure,
    ConfigurationError,
    ExecutionEnvironmentError,
    LaunchError,
    ProcessExitError,
    ProdRunError,
    TeardownError,
    UnsupportedOperationError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "RunOrchestrator",
    "main_cli",
    # Models
    "AppConfig",
    "CompanionConfig",
    "ExecutionResult",
    "LogLevel",
    "OsFamily",
    "ProcessSpec",
    "RunProfile",
    "RunRole",
    "StackTraceMode",
    "VerbositySettings",
    # Execution
    "CompanionProcessSupervisor",
    "ProcessRunner",
    "build_process_spec",
    # System utilities
    "build_command",
    "decorate_command",
    "resolve_verbosity",
    # Errors
    "ProdRunError",
    "ConfigurationError",
    "ExecutionEnvironmentError",
    "UnsupportedOperationError",
    "LaunchError",
    "CompanionFailure",
    "TeardownError",
    "ProcessExitError",
    "ValidationError",
]
