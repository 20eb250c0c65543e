"""
Orchestration of a complete run.

The orchestrator composes command assembly, platform decoration, the
companion lifecycle and the primary process runner.
"""

from .orchestrator import DISPLAY_ROLES, RunOrchestrator

__all__ = [
    "DISPLAY_ROLES",
    "RunOrchestrator",
]
