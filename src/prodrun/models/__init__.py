"""
Data models for the run pipeline.

Configuration Models:
- Process specifications and companion capture settings
- Named run profiles and global settings from config.toml

Runtime Models:
- Host operating system family
- Log level, stack-trace mode and derived verbosity settings
- Sectioned command lines and companion lifecycle states

Result Models:
- Exit status of a finished process
"""

from .config import (
    AppConfig,
    CompanionConfig,
    GeneralConfig,
    ProcessSpec,
    RunProfile,
    RunRole,
)

from .runtime import (
    CommandLine,
    CompanionState,
    CompanionStatus,
    LogLevel,
    OsFamily,
    StackTraceMode,
    VerbositySettings,
)

from .results import ExecutionResult

__all__ = [
    # Configuration
    "AppConfig",
    "CompanionConfig",
    "GeneralConfig",
    "ProcessSpec",
    "RunProfile",
    "RunRole",
    # Runtime
    "CommandLine",
    "CompanionState",
    "CompanionStatus",
    "LogLevel",
    "OsFamily",
    "StackTraceMode",
    "VerbositySettings",
    # Results
    "ExecutionResult",
]
