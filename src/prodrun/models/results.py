"""
Execution result models.

The result of a primary run is plain data: a non-zero exit code is reported,
not raised, until a caller asks for it to be asserted.
"""

import shlex
from dataclasses import dataclass
from typing import List

from ..validation import ProcessExitError


@dataclass(frozen=True)
class ExecutionResult:
    """
    Exit status of one finished process and the command line that produced it.
    """

    exit_code: int
    # Effective argv, kept for diagnostics.
    command_line: List[str]

    @property
    def normal(self) -> bool:
        return self.exit_code == 0

    @property
    def command_string(self) -> str:
        return shlex.join(self.command_line)

    def assert_normal_exit_value(self) -> "ExecutionResult":
        """
        Raise ProcessExitError unless the process exited with code 0.

        Returns:
            self, so the call can be chained
        """
        if not self.normal:
            raise ProcessExitError(
                f"Process '{self.command_string}' finished with non-zero exit value {self.exit_code}",
                exit_code=self.exit_code,
            )
        return self
