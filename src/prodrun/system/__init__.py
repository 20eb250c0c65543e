"""
System interaction utilities for building and placing command lines.

This package provides:

- Command line assembly from process specifications
- The stream forwarding (verbosity) policy for child processes
- Host detection and platform-specific command decoration
- Java toolchain lookup
"""

from .commands import assemble_command, build_command

from .platform import decorate_command, detect_os_family, should_use_xvfb

from .toolchain import resolve_java_executable

from .verbosity import (
    logging_level_for,
    parse_log_level,
    parse_stacktrace_mode,
    resolve_verbosity,
)

__all__ = [
    # Commands
    "assemble_command",
    "build_command",
    # Platform
    "decorate_command",
    "detect_os_family",
    "should_use_xvfb",
    # Toolchain
    "resolve_java_executable",
    # Verbosity
    "logging_level_for",
    "parse_log_level",
    "parse_stacktrace_mode",
    "resolve_verbosity",
]
