"""
Run orchestration.

RunOrchestrator ties the pipeline together: prepare the working directory,
assemble and decorate the command, keep the companion capture alive around
the primary run, and reconcile the two outcomes.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Mapping, Optional

from ..execution import CompanionProcessSupervisor, ProcessRunner
from ..models import (
    CompanionConfig,
    ExecutionResult,
    OsFamily,
    ProcessSpec,
    RunRole,
    VerbositySettings,
)
from ..system import assemble_command, decorate_command, detect_os_family
from ..validation import ExecutionEnvironmentError, UnsupportedOperationError

logger = logging.getLogger(__name__)

# Roles that open a window and therefore need platform decoration.
DISPLAY_ROLES = frozenset({RunRole.CLIENT})


class RunOrchestrator:
    """
    Executes one ProcessSpec, optionally alongside a companion capture.

    The raw ExecutionResult is returned; deciding whether a non-zero exit
    code is fatal is left to the caller.
    """

    def __init__(
        self,
        verbosity: VerbositySettings,
        runner: Optional[ProcessRunner] = None,
        supervisor_factory: Callable[[], CompanionProcessSupervisor] = CompanionProcessSupervisor,
        os_family: Optional[OsFamily] = None,
        host_env: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            verbosity: Stream forwarding decisions for the primary process
            runner: ProcessRunner to use (a new one by default)
            supervisor_factory: Creates the companion supervisor for each run
            os_family: Host OS family (detected by default)
            host_env: Host environment for platform decisions (os.environ by default)
        """
        self.verbosity = verbosity
        self.runner = runner or ProcessRunner()
        self.supervisor_factory = supervisor_factory
        self.os_family = os_family or detect_os_family()
        self.host_env = os.environ if host_env is None else host_env
        self.supervisor: Optional[CompanionProcessSupervisor] = None

    def prepare_work_dir(self, work_dir: Path) -> Path:
        """Create the working directory (and parents) if it is missing."""
        work_dir = Path(work_dir)
        try:
            work_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExecutionEnvironmentError(
                f"Cannot create working directory '{work_dir}': {e}"
            ) from e
        return work_dir

    def build_argv(self, spec: ProcessSpec) -> list:
        """
        Assemble the command for ``spec`` and apply host decoration.

        Raises:
            UnsupportedOperationError: If Xvfb is forced on a role without a window
        """
        command = assemble_command(spec)
        if spec.role in DISPLAY_ROLES:
            command = decorate_command(command, self.os_family, self.host_env, spec.use_xvfb)
        elif spec.use_xvfb:
            raise UnsupportedOperationError(
                f"Xvfb only applies to windowed runs, not to {spec.role.value} runs"
            )
        return command.to_argv()

    def execute(self, spec: ProcessSpec,
                companion_config: Optional[CompanionConfig] = None) -> ExecutionResult:
        """
        Run the primary process described by ``spec``.

        When ``companion_config`` names an executable the companion is started
        first and always stopped after the primary returns or raises. A
        companion teardown failure fails the run only if the primary succeeded.

        Returns:
            The primary process's ExecutionResult

        Raises:
            ConfigurationError: If the command cannot be assembled
            ExecutionEnvironmentError: For directory or platform problems
            LaunchError: If the primary or companion cannot be started
            TeardownError: If the companion failed after a successful run
        """
        work_dir = self.prepare_work_dir(spec.work_dir)
        argv = self.build_argv(spec)

        self.supervisor = self.supervisor_factory()
        with self.supervisor.session(companion_config) as session:
            result = self.runner.run(argv, work_dir, spec.env, self.verbosity)
            session.record_result(result)

        return result
