"""
Command line assembly.

This module turns a ProcessSpec into the argument vector handed to the
operating system. Assembly is pure: nothing is resolved or created here.
"""

import logging
import os
from typing import List

from ..models import CommandLine, ProcessSpec
from ..validation import ConfigurationError

logger = logging.getLogger(__name__)

CLASSPATH_FLAG = "-cp"


def assemble_command(spec: ProcessSpec) -> CommandLine:
    """Split a ProcessSpec into the sections of a command line.

    Args:
        spec: The process specification to assemble.

    Returns:
        A CommandLine with the executable, runtime flags, classpath, main
        class and program arguments of ``spec``.

    Raises:
        ConfigurationError: If the executable path is empty.
    """
    if not spec.executable or not spec.executable.strip():
        raise ConfigurationError("Cannot build a command without an executable path")

    return CommandLine(
        executable=spec.executable,
        runtime_flags=spec.runtime_flags,
        classpath=spec.classpath,
        main_class=spec.main_class,
        program_args=spec.program_args,
    )


def build_command(spec: ProcessSpec, separator: str = os.pathsep) -> List[str]:
    """Build the argument vector for a ProcessSpec.

    The order is fixed: executable, runtime flags, ``-cp`` followed by the
    joined classpath, the main class, then program arguments. The classpath
    flag and main class are left out when the spec has none.

    Examples:
        >>> build_command(ProcessSpec("/bin/echo", program_args=("hello",)))
        ['/bin/echo', 'hello']
    """
    argv = assemble_command(spec).to_argv(separator)
    logger.debug(f"Built command: {argv}")
    return argv
