"""
Per-role argument builders.

Each run profile is turned into a ProcessSpec by the builder for its role.
The client and server launch the game through Fabric's entry points; a tool
profile runs an arbitrary executable with only the configured arguments.
"""

import logging
import os
import zipfile
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from ..models import ProcessSpec, RunProfile, RunRole
from ..system import resolve_java_executable
from ..validation import ConfigurationError, ExecutionEnvironmentError

logger = logging.getLogger(__name__)

CLIENT_MAIN_CLASS = "net.fabricmc.loader.impl.launch.knot.KnotClient"
SERVER_MAIN_CLASS = "net.fabricmc.installer.ServerLauncher"
ADD_MODS_PROPERTY = "-Dfabric.addMods="
INSTALL_PROPERTIES_ENTRY = "install.properties"


def join_paths(paths: Iterable[Path]) -> str:
    return os.pathsep.join(str(Path(p).absolute()) for p in paths)


def _runtime_flags(profile: RunProfile) -> List[str]:
    flags = list(profile.jvm_args)
    if profile.mods:
        flags.append(ADD_MODS_PROPERTY + join_paths(profile.mods))
    return flags


def _require(value: Optional[object], field_name: str, profile: RunProfile):
    if value is None or value == "":
        raise ConfigurationError(
            f"Profile '{profile.name}' ({profile.role.value}) requires '{field_name}'"
        )
    return value


def build_client_spec(profile: RunProfile, executable: str,
                      extra_args: Iterable[str] = ()) -> ProcessSpec:
    """
    ProcessSpec for a game client run.

    Program arguments end with the asset index, the assets directory and the
    game directory (the run directory).
    """
    asset_index = _require(profile.asset_index, "asset_index", profile)
    assets_dir = _require(profile.assets_dir, "assets_dir", profile)

    program_args = list(profile.program_args) + list(extra_args)
    program_args += [
        "--assetIndex", asset_index,
        "--assetsDir", str(Path(assets_dir).absolute()),
        "--gameDir", str(Path(profile.run_dir).absolute()),
    ]

    return ProcessSpec(
        executable=executable,
        main_class=profile.main_class or CLIENT_MAIN_CLASS,
        program_args=tuple(program_args),
        runtime_flags=tuple(_runtime_flags(profile)),
        classpath=tuple(profile.classpath),
        work_dir=profile.run_dir,
        env=dict(profile.env),
        role=RunRole.CLIENT,
        use_xvfb=profile.use_xvfb,
    )


def write_install_properties(jar_path: Path, loader_version: str,
                             minecraft_version: str) -> Path:
    """
    Write the jar that tells the server launcher which versions to install.

    The jar holds a single ``install.properties`` entry and is rewritten on
    every call.

    Raises:
        ExecutionEnvironmentError: If the jar cannot be written
    """
    jar_path = Path(jar_path)
    contents = f"fabric-loader-version={loader_version}\ngame-version={minecraft_version}"

    try:
        jar_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(jar_path, "w") as jar:
            jar.writestr(INSTALL_PROPERTIES_ENTRY, contents)
    except OSError as e:
        raise ExecutionEnvironmentError(
            f"Cannot write {INSTALL_PROPERTIES_ENTRY} jar '{jar_path}': {e}"
        ) from e

    logger.debug(f"Wrote {INSTALL_PROPERTIES_ENTRY} to {jar_path}")
    return jar_path


def build_server_spec(profile: RunProfile, executable: str,
                      extra_args: Iterable[str] = ()) -> ProcessSpec:
    """
    ProcessSpec for a dedicated server run.

    Side effect: writes the install properties jar, which is appended to the
    classpath.
    """
    loader_version = _require(profile.loader_version, "loader_version", profile)
    minecraft_version = _require(profile.minecraft_version, "minecraft_version", profile)
    jar_path = _require(profile.install_properties_jar, "install_properties_jar", profile)

    properties_jar = write_install_properties(jar_path, loader_version, minecraft_version)

    return ProcessSpec(
        executable=executable,
        main_class=profile.main_class or SERVER_MAIN_CLASS,
        program_args=tuple(list(profile.program_args) + ["nogui"] + list(extra_args)),
        runtime_flags=tuple(_runtime_flags(profile)),
        classpath=tuple(profile.classpath) + (properties_jar,),
        work_dir=profile.run_dir,
        env=dict(profile.env),
        role=RunRole.SERVER,
    )


def build_tool_spec(profile: RunProfile, executable: str,
                    extra_args: Iterable[str] = ()) -> ProcessSpec:
    """ProcessSpec for an external tool: configured arguments only."""
    return ProcessSpec(
        executable=executable,
        main_class=profile.main_class or "",
        program_args=tuple(list(profile.program_args) + list(extra_args)),
        runtime_flags=tuple(profile.jvm_args),
        classpath=tuple(profile.classpath),
        work_dir=profile.run_dir,
        env=dict(profile.env),
        role=RunRole.TOOL,
    )


SPEC_BUILDERS: Dict[RunRole, Callable[..., ProcessSpec]] = {
    RunRole.CLIENT: build_client_spec,
    RunRole.SERVER: build_server_spec,
    RunRole.TOOL: build_tool_spec,
}


def build_process_spec(profile: RunProfile, extra_args: Iterable[str] = (),
                       env: Optional[Mapping[str, str]] = None) -> ProcessSpec:
    """
    Resolve the executable for ``profile`` and build its ProcessSpec.

    Java roles look the executable up through the toolchain resolver; a tool
    profile must name its executable.
    """
    if profile.role is RunRole.TOOL:
        executable = profile.executable or ""
    else:
        executable = resolve_java_executable(profile.executable, env)

    return SPEC_BUILDERS[profile.role](profile, executable, extra_args)
