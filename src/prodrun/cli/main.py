"""
Command-line interface for prodrun.

This module provides the main CLI entry point: it loads the configuration,
resolves the verbosity of child processes from the requested log level,
runs a profile (optionally with the companion capture) and turns failures
into a logged message and a non-zero exit status.
"""

import argparse
import logging
import sys
import tomllib
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..execution import build_process_spec
from ..models import LogLevel, StackTraceMode
from ..orchestration import RunOrchestrator
from ..system import logging_level_for, parse_log_level, parse_stacktrace_mode, resolve_verbosity
from ..validation import ProdRunError, ValidationError, handle_cli_error

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prodrun",
        description="Run game clients, servers and tools with an optional capture process.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config.toml (defaults to conf/config.toml).",
    )

    level = parser.add_mutually_exclusive_group()
    level.add_argument("-d", "--debug", dest="log_level", action="store_const",
                       const=LogLevel.DEBUG, help="Log debug output and forward child output.")
    level.add_argument("-i", "--info", dest="log_level", action="store_const",
                       const=LogLevel.INFO, help="Log info output and forward child output.")
    level.add_argument("-w", "--warn", dest="log_level", action="store_const",
                       const=LogLevel.WARN, help="Only log warnings and errors.")
    level.add_argument("-q", "--quiet", dest="log_level", action="store_const",
                       const=LogLevel.QUIET, help="Only log errors.")

    trace = parser.add_mutually_exclusive_group()
    trace.add_argument("-s", "--stacktrace", dest="stacktrace", action="store_const",
                       const=StackTraceMode.ALWAYS, help="Print stack traces for all errors.")
    trace.add_argument("-S", "--full-stacktrace", dest="stacktrace", action="store_const",
                       const=StackTraceMode.ALWAYS_FULL, help="Print full stack traces for all errors.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a configured profile.")
    run_parser.add_argument("profile", help="Name of a [profiles.<name>] table.")
    run_parser.add_argument(
        "--no-capture",
        action="store_true",
        help="Do not start the companion capture even if one is configured.",
    )
    run_parser.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="Extra program arguments appended after the configured ones.",
    )

    subparsers.add_parser("profiles", help="List configured profiles.")
    return parser


def _load_config(config_path: Optional[Path]):
    if config_path is not None:
        set_config_path(config_path)
    try:
        return get_config()
    except (FileNotFoundError, KeyError, ValidationError, tomllib.TOMLDecodeError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            logger=logger,
        )


def list_profiles(app_config) -> None:
    if not app_config.profiles:
        logger.info("No profiles configured.")
        return
    for name, profile in sorted(app_config.profiles.items()):
        logger.info(f"{name}: {profile.role.value} (run dir: {profile.run_dir})")


def run_profile(app_config, profile_name: str, extra_args: List[str],
                log_level: LogLevel, stacktrace: StackTraceMode,
                capture: bool = True) -> None:
    """
    Run one profile and fail the process if the run did not exit normally.

    Raises:
        SystemExit: On any run failure, naming the phase that failed
    """
    try:
        profile = app_config.get_profile(profile_name)
    except KeyError as e:
        handle_cli_error(error=e, context="profile lookup", exit_code=1, logger=logger)

    verbosity = resolve_verbosity(log_level, stacktrace)
    companion = app_config.companion if capture else None
    include_traceback = stacktrace is not StackTraceMode.INTERNAL_EXCEPTIONS

    try:
        spec = build_process_spec(profile, extra_args)
        orchestrator = RunOrchestrator(verbosity)
        result = orchestrator.execute(spec, companion)
        result.assert_normal_exit_value()
    except ProdRunError as e:
        handle_cli_error(
            error=e,
            context=f"{e.phase} of profile '{profile_name}'",
            exit_code=1,
            include_traceback=include_traceback,
            logger=logger,
        )

    logger.info(f"Profile '{profile_name}' finished successfully")


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for prodrun.

    Raises:
        SystemExit: On configuration errors or failed runs.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    app_config = _load_config(args.config)

    log_level = args.log_level or parse_log_level(app_config.general.log_level)
    stacktrace = args.stacktrace or parse_stacktrace_mode(app_config.general.stacktrace)
    logging.getLogger().setLevel(logging_level_for(log_level))

    if args.command == "profiles":
        list_profiles(app_config)
        return

    extra_args = list(args.args)
    if extra_args and extra_args[0] == "--":
        extra_args = extra_args[1:]

    run_profile(
        app_config,
        args.profile,
        extra_args,
        log_level=log_level,
        stacktrace=stacktrace,
        capture=not args.no_capture,
    )


if __name__ == "__main__":
    main_cli()
