"""
Configuration data models.

This module contains the immutable value objects that describe a single
invocation (the process to run and the optional companion capture process)
as well as the profiles and settings loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple


class RunRole(Enum):
    """Tagged variants of a run; each role gets its own argument builder."""

    CLIENT = "client"
    SERVER = "server"
    TOOL = "tool"


@dataclass(frozen=True)
class ProcessSpec:
    """
    Everything needed to assemble one primary process command line.
    """

    # Resolved by the toolchain lookup before the spec is built.
    executable: str
    # Main entry point passed after the classpath; empty for plain tools.
    main_class: str = ""
    program_args: Tuple[str, ...] = ()
    runtime_flags: Tuple[str, ...] = ()
    # Made absolute and deduplicated in __post_init__, joined with os.pathsep at build time.
    classpath: Tuple[Path, ...] = ()
    work_dir: Path = Path("run")
    env: Mapping[str, str] = field(default_factory=dict)
    role: RunRole = RunRole.TOOL
    # None means "decide from the host" (Linux + CI).
    use_xvfb: Optional[bool] = None

    def __post_init__(self):
        object.__setattr__(self, "program_args", tuple(self.program_args))
        object.__setattr__(self, "runtime_flags", tuple(self.runtime_flags))
        unique = dict.fromkeys(Path(entry).absolute() for entry in self.classpath)
        object.__setattr__(self, "classpath", tuple(unique))
        object.__setattr__(self, "work_dir", Path(self.work_dir))


@dataclass(frozen=True)
class CompanionConfig:
    """
    Settings for the optional capture process started next to the primary.
    """

    # No executable means "no companion".
    executable: Optional[Path] = None
    output: Path = Path("run/capture.tracy")
    max_shutdown_wait_seconds: int = 10

    @property
    def enabled(self) -> bool:
        return self.executable is not None


@dataclass
class GeneralConfig:
    """
    Global settings from the `[general]` table of `config.toml`.
    """

    # One of the LogLevel names, e.g. "lifecycle".
    log_level: str = "lifecycle"
    # One of the StackTraceMode names, e.g. "internal".
    stacktrace: str = "internal"


@dataclass
class RunProfile:
    """
    A named run configuration from a `[profiles.<name>]` table.
    """

    name: str
    role: RunRole
    run_dir: Path
    # Java executable for client/server, the binary itself for tools.
    executable: Optional[str] = None
    main_class: Optional[str] = None
    jvm_args: List[str] = field(default_factory=list)
    program_args: List[str] = field(default_factory=list)
    mods: List[Path] = field(default_factory=list)
    classpath: List[Path] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    use_xvfb: Optional[bool] = None

    # Client-only settings.
    asset_index: Optional[str] = None
    assets_dir: Optional[Path] = None

    # Server-only settings.
    loader_version: Optional[str] = None
    minecraft_version: Optional[str] = None
    install_properties_jar: Optional[Path] = None


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    general: GeneralConfig
    profiles: Dict[str, RunProfile]
    companion: CompanionConfig

    def get_profile(self, name: str) -> RunProfile:
        try:
            return self.profiles[name]
        except KeyError:
            raise KeyError(
                f"Unknown profile '{name}'. Available: {sorted(self.profiles)}"
            ) from None
