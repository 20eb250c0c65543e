"""
Java executable lookup.

The executable of a run either comes straight from the configuration or is
found the way a shell would find it: ``$JAVA_HOME/bin/java`` first, then
``java`` on the ``PATH``.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Mapping, Optional

from ..validation import ConfigurationError

logger = logging.getLogger(__name__)


def _java_binary_name() -> str:
    return "java.exe" if os.name == "nt" else "java"


def resolve_java_executable(explicit: Optional[str] = None,
                            env: Optional[Mapping[str, str]] = None) -> str:
    """
    Resolve the Java executable used to launch the game.

    Args:
        explicit: Path from the profile, used as-is when given
        env: Environment to read JAVA_HOME and PATH from (defaults to os.environ)

    Returns:
        Absolute path of the executable

    Raises:
        ConfigurationError: If no executable can be found
    """
    env = os.environ if env is None else env

    if explicit:
        logger.debug(f"Using configured Java executable: {explicit}")
        return explicit

    java_home = env.get("JAVA_HOME")
    if java_home:
        candidate = Path(java_home) / "bin" / _java_binary_name()
        if candidate.is_file():
            logger.debug(f"Using Java from JAVA_HOME: {candidate}")
            return str(candidate)
        logger.warning(f"JAVA_HOME is set to '{java_home}' but {candidate} does not exist")

    found = shutil.which(_java_binary_name(), path=env.get("PATH"))
    if found:
        logger.debug(f"Using Java from PATH: {found}")
        return found

    raise ConfigurationError(
        "No Java executable configured and none found via JAVA_HOME or PATH"
    )
