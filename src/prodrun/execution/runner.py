"""
Synchronous execution of the primary process.

The runner blocks the calling thread until the child exits and reports the
exit code as data. Output that the verbosity policy does not forward goes to
the null device rather than a buffer, so chatty children cannot grow memory.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ..models import ExecutionResult, VerbositySettings
from ..validation import ExecutionEnvironmentError, LaunchError, handle_subprocess_error

logger = logging.getLogger(__name__)


class ProcessRunner:
    """
    Runs one external process to completion.

    Non-zero exit codes are returned, never retried: an interactive client or
    server run cannot be safely repeated.
    """

    def run(self, argv: Sequence[str], work_dir: Path,
            env: Optional[Mapping[str, str]],
            verbosity: VerbositySettings) -> ExecutionResult:
        """
        Execute ``argv`` in ``work_dir`` and wait for it to exit.

        Args:
            argv: Full argument vector, executable first
            work_dir: Existing working directory for the child
            env: Environment overrides merged on top of os.environ
            verbosity: Whether stdout/stderr are inherited or discarded

        Returns:
            ExecutionResult with the exit code and the command used

        Raises:
            ExecutionEnvironmentError: If work_dir does not exist
            LaunchError: If the operating system cannot start the process
        """
        command = list(argv)
        work_dir = Path(work_dir)

        if not work_dir.is_dir():
            raise ExecutionEnvironmentError(
                f"Working directory does not exist: {work_dir}"
            )

        child_env = dict(os.environ)
        if env:
            child_env.update(env)

        # None inherits our own stream.
        stdout = None if verbosity.forward_stdout else subprocess.DEVNULL
        stderr = None if verbosity.forward_stderr else subprocess.DEVNULL

        logger.debug(f"Running command: {command} in {work_dir}")

        try:
            completed = subprocess.run(
                command,
                cwd=work_dir,
                env=child_env,
                stdin=subprocess.DEVNULL,
                stdout=stdout,
                stderr=stderr,
                check=False,
            )
        except OSError as e:
            handle_subprocess_error(
                error=e,
                command=" ".join(command),
                reraise=False,
                logger=logger,
            )
            raise LaunchError(f"Failed to start '{command[0]}': {e}", command=command) from e

        logger.info(f"Process {command[0]} finished with exit code {completed.returncode}")
        return ExecutionResult(exit_code=completed.returncode, command_line=command)
