"""
Process execution for the run pipeline.

This package runs the primary process, supervises the companion capture
process, and builds process specifications for each run role.
"""

from .companion import (
    CompanionHandle,
    CompanionProcessSupervisor,
    CompanionSession,
    build_companion_command,
)
from .constants import TimeoutConstants
from .roles import (
    build_client_spec,
    build_process_spec,
    build_server_spec,
    build_tool_spec,
    write_install_properties,
)
from .runner import ProcessRunner

__all__ = [
    "CompanionHandle",
    "CompanionProcessSupervisor",
    "CompanionSession",
    "build_companion_command",
    "TimeoutConstants",
    "build_client_spec",
    "build_process_spec",
    "build_server_spec",
    "build_tool_spec",
    "write_install_properties",
    "ProcessRunner",
]
