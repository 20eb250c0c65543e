"""
Host-specific rewriting of command lines.

On Linux a graphical client may be routed through a virtual framebuffer
wrapper (headless CI machines have no display); on macOS the JVM must start
the game on the first thread. Every other host gets the command unchanged.
"""

import logging
import os
import sys
from typing import Mapping, Optional

from ..models import CommandLine, OsFamily
from ..validation import UnsupportedOperationError

logger = logging.getLogger(__name__)

XVFB_RUN_EXECUTABLE = "/usr/bin/xvfb-run"
# -a picks a free server number so parallel runs don't collide.
XVFB_RUN_FLAGS = ("-a",)
MACOS_FIRST_THREAD_FLAG = "-XstartOnFirstThread"

# Presence of this variable marks a continuous integration host.
CI_ENV_VAR = "CI"


def detect_os_family(platform_name: Optional[str] = None) -> OsFamily:
    """Classify ``sys.platform`` (or the given name) into an OsFamily."""
    name = platform_name if platform_name is not None else sys.platform
    if name.startswith("linux"):
        return OsFamily.LINUX
    if name == "darwin":
        return OsFamily.MACOS
    return OsFamily.OTHER


def is_ci_environment(env: Mapping[str, str]) -> bool:
    value = env.get(CI_ENV_VAR)
    return value is not None and value.strip().lower() not in ("", "0", "false")


def should_use_xvfb(os_family: OsFamily, env: Mapping[str, str],
                    use_xvfb: Optional[bool] = None) -> bool:
    """
    Decide whether to wrap the command in the virtual framebuffer runner.

    Args:
        os_family: The host OS family
        env: Environment used to detect a CI host
        use_xvfb: Explicit setting; None derives the default (Linux and CI)

    Raises:
        UnsupportedOperationError: If forced on for a non-Linux host
    """
    if use_xvfb is None:
        return os_family is OsFamily.LINUX and is_ci_environment(env)

    if use_xvfb and os_family is not OsFamily.LINUX:
        raise UnsupportedOperationError(
            f"Xvfb is only supported on Linux, not on {os_family.value}"
        )
    return use_xvfb


def decorate_command(command: CommandLine, os_family: OsFamily,
                     env: Optional[Mapping[str, str]] = None,
                     use_xvfb: Optional[bool] = None) -> CommandLine:
    """
    Rewrite a command line for the host it is about to run on.

    Args:
        command: The assembled command line
        os_family: The host OS family
        env: Host environment (defaults to os.environ)
        use_xvfb: Explicit virtual framebuffer setting, None for the default

    Returns:
        The decorated CommandLine; the input is not modified

    Raises:
        UnsupportedOperationError: If Xvfb is forced on a non-Linux host
    """
    env = os.environ if env is None else env
    decorated = command

    if should_use_xvfb(os_family, env, use_xvfb):
        logger.info(f"Running through {XVFB_RUN_EXECUTABLE}")
        decorated = decorated.with_wrapper(XVFB_RUN_EXECUTABLE, *XVFB_RUN_FLAGS)

    if os_family is OsFamily.MACOS:
        decorated = decorated.with_runtime_flag(MACOS_FIRST_THREAD_FLAG)

    return decorated
