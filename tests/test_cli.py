"""
Tests for the prodrun command-line interface.
"""

import logging
import sys

import pytest
import toml

from prodrun.cli.main import build_parser, main_cli
from prodrun.models import LogLevel, StackTraceMode


@pytest.fixture(autouse=True)
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


@pytest.fixture
def cli_config(config_files, sample_config_data):
    """Config with extra Python-based tool profiles."""
    profiles = sample_config_data["profiles"]
    profiles["ok"] = {
        "role": "tool",
        "executable": sys.executable,
        "run_dir": "run/ok",
        "program_args": ["-c", "import sys, pathlib; pathlib.Path('args.txt').write_text(' '.join(sys.argv[1:]))"],
    }
    profiles["fail"] = {
        "role": "tool",
        "executable": sys.executable,
        "run_dir": "run/fail",
        "program_args": ["-c", "raise SystemExit(5)"],
    }
    with open(config_files["config"], "w") as f:
        toml.dump(sample_config_data, f)
    return config_files


@pytest.mark.unit
class TestParser:
    """Test cases for argument parsing."""

    def test_run_defaults(self):
        args = build_parser().parse_args(["run", "client"])

        assert args.command == "run"
        assert args.profile == "client"
        assert args.log_level is None
        assert args.stacktrace is None
        assert args.no_capture is False
        assert args.args == []

    def test_level_and_stacktrace_flags(self):
        args = build_parser().parse_args(["-d", "-S", "run", "server", "--no-capture"])

        assert args.log_level is LogLevel.DEBUG
        assert args.stacktrace is StackTraceMode.ALWAYS_FULL
        assert args.no_capture is True

    def test_level_flags_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-d", "-q", "run", "client"])

    def test_extra_program_arguments(self):
        args = build_parser().parse_args(["run", "client", "--", "--demo", "--width", "800"])

        assert args.args[-3:] == ["--demo", "--width", "800"]


@pytest.mark.e2e
class TestMainCli:
    """Test cases for running profiles through main_cli."""

    def test_run_profile(self, cli_config):
        main_cli(["--config", str(cli_config["config"]), "run", "ok"])

        assert (cli_config["dir"] / "run" / "ok" / "args.txt").read_text() == ""

    def test_extra_args_are_appended(self, cli_config):
        main_cli(["--config", str(cli_config["config"]), "run", "ok", "--", "a", "b"])

        assert (cli_config["dir"] / "run" / "ok" / "args.txt").read_text() == "a b"

    def test_failing_profile_exits_non_zero(self, cli_config, caplog):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(cli_config["config"]), "run", "fail"])

        assert exc_info.value.code == 1
        assert "run of profile 'fail'" in caplog.text

    def test_unknown_profile(self, cli_config):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(cli_config["config"]), "run", "missing"])

        assert exc_info.value.code == 1

    def test_missing_config(self, temp_dir):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(temp_dir / "missing.toml"), "profiles"])

        assert exc_info.value.code == 1

    def test_list_profiles(self, cli_config, caplog):
        with caplog.at_level(logging.INFO):
            main_cli(["--config", str(cli_config["config"]), "profiles"])

        assert "echo: tool" in caplog.text
        assert "client: client" in caplog.text
