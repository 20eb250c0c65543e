"""
Configuration validation utilities.

This module turns the raw tables of config.toml into validated
GeneralConfig, RunProfile and CompanionConfig instances.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..execution.constants import TimeoutConstants
from ..models.config import CompanionConfig, GeneralConfig, RunProfile, RunRole
from ..models.runtime import LogLevel, StackTraceMode
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_non_empty_string,
    validate_optional_bool,
    validate_positive_integer,
    validate_profile_name,
    validate_string_list,
)
from .loader import resolve_relative

logger = logging.getLogger(__name__)


def _optional_string(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    return validate_non_empty_string(value, field_name=field_name)


def _optional_path(value: Any, field_name: str, base_dir: Path) -> Optional[Path]:
    if value is None:
        return None
    return resolve_relative(validate_non_empty_string(value, field_name=field_name), base_dir)


def validate_general_config(general_data: Dict[str, Any]) -> GeneralConfig:
    """
    Validate and create a GeneralConfig from the `[general]` table.

    Raises:
        ValidationError: If validation fails
    """
    log_level = validate_enum_choice(
        general_data.get("log_level", "lifecycle"),
        choices=[level.name.lower() for level in LogLevel],
        field_name="general.log_level",
        case_sensitive=False,
    )

    stacktrace = validate_enum_choice(
        general_data.get("stacktrace", "internal"),
        choices=[mode.value for mode in StackTraceMode],
        field_name="general.stacktrace",
        case_sensitive=False,
    )

    return GeneralConfig(log_level=log_level, stacktrace=stacktrace)


def validate_profile(name: str, profile_data: Dict[str, Any], base_dir: Path) -> RunProfile:
    """
    Validate and create a RunProfile from a `[profiles.<name>]` table.

    Args:
        name: The profile's table name
        profile_data: Raw table contents
        base_dir: Directory relative paths are resolved against

    Returns:
        Validated RunProfile

    Raises:
        ValidationError: If validation fails
    """
    prefix = f"profiles.{name}"

    role = RunRole(validate_enum_choice(
        profile_data.get("role", "tool"),
        choices=[role.value for role in RunRole],
        field_name=f"{prefix}.role",
    ))

    env = profile_data.get("env", {})
    if not isinstance(env, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in env.items()
    ):
        raise ValidationError(
            f"{prefix}.env must be a table of string values",
            field_name=f"{prefix}.env",
            value=env,
        )

    profile = RunProfile(
        name=name,
        role=role,
        run_dir=resolve_relative(
            validate_non_empty_string(profile_data.get("run_dir", "run"), f"{prefix}.run_dir"),
            base_dir,
        ),
        executable=_optional_string(profile_data.get("executable"), f"{prefix}.executable"),
        main_class=_optional_string(profile_data.get("main_class"), f"{prefix}.main_class"),
        jvm_args=validate_string_list(profile_data.get("jvm_args", []), f"{prefix}.jvm_args"),
        program_args=validate_string_list(profile_data.get("program_args", []), f"{prefix}.program_args"),
        mods=[resolve_relative(p, base_dir) for p in
              validate_string_list(profile_data.get("mods", []), f"{prefix}.mods")],
        classpath=[resolve_relative(p, base_dir) for p in
                   validate_string_list(profile_data.get("classpath", []), f"{prefix}.classpath")],
        env=dict(env),
        use_xvfb=validate_optional_bool(profile_data.get("use_xvfb"), f"{prefix}.use_xvfb"),
        asset_index=_optional_string(profile_data.get("asset_index"), f"{prefix}.asset_index"),
        assets_dir=_optional_path(profile_data.get("assets_dir"), f"{prefix}.assets_dir", base_dir),
        loader_version=_optional_string(profile_data.get("loader_version"), f"{prefix}.loader_version"),
        minecraft_version=_optional_string(profile_data.get("minecraft_version"), f"{prefix}.minecraft_version"),
        install_properties_jar=_optional_path(
            profile_data.get("install_properties_jar"), f"{prefix}.install_properties_jar", base_dir
        ),
    )

    _validate_role_requirements(profile, prefix, base_dir)
    return profile


def _validate_role_requirements(profile: RunProfile, prefix: str, base_dir: Path) -> None:
    """Check the settings each role cannot run without."""
    if profile.role is RunRole.TOOL:
        if not profile.executable:
            raise ValidationError(
                f"{prefix}.executable is required for tool profiles",
                field_name=f"{prefix}.executable",
            )
        return

    if profile.role is RunRole.CLIENT:
        required = {"asset_index": profile.asset_index, "assets_dir": profile.assets_dir}
    else:
        required = {
            "loader_version": profile.loader_version,
            "minecraft_version": profile.minecraft_version,
        }
        if profile.install_properties_jar is None:
            profile.install_properties_jar = base_dir / "build" / "server_properties.jar"

    for key, value in required.items():
        if value is None:
            raise ValidationError(
                f"{prefix}.{key} is required for {profile.role.value} profiles",
                field_name=f"{prefix}.{key}",
            )

    if profile.use_xvfb is not None and profile.role is not RunRole.CLIENT:
        logger.warning(f"{prefix}.use_xvfb only applies to client profiles and is ignored")


def validate_profiles_config(profiles_data: Dict[str, Any], base_dir: Path) -> Dict[str, RunProfile]:
    """
    Validate every `[profiles.*]` table.

    Raises:
        ValidationError: If any profile is invalid
    """
    if not isinstance(profiles_data, dict):
        raise ValidationError("profiles must be a table of named profiles", field_name="profiles")

    profiles: Dict[str, RunProfile] = {}
    for name, data in profiles_data.items():
        validate_profile_name(name, existing_names=list(profiles), field_name="profile name")
        if not isinstance(data, dict):
            raise ValidationError(f"profiles.{name} must be a table", field_name=f"profiles.{name}")
        profiles[name] = validate_profile(name, data, base_dir)

    return profiles


def validate_companion_config(companion_data: Dict[str, Any], base_dir: Path) -> CompanionConfig:
    """
    Validate and create a CompanionConfig from the `[companion]` table.

    An absent or empty `executable` disables the companion.
    """
    executable = companion_data.get("executable") or None
    max_wait = validate_positive_integer(
        companion_data.get("max_shutdown_wait_seconds", TimeoutConstants.DEFAULT_MAX_SHUTDOWN_WAIT_SECONDS),
        min_value=0,
        max_value=3600,
        field_name="companion.max_shutdown_wait_seconds",
    )
    output = resolve_relative(
        validate_non_empty_string(companion_data.get("output", "run/capture.tracy"), "companion.output"),
        base_dir,
    )

    return CompanionConfig(
        executable=_optional_path(executable, "companion.executable", base_dir),
        output=output,
        max_shutdown_wait_seconds=max_wait,
    )
