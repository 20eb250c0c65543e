"""
Tests for the synchronous primary process runner.
"""

import subprocess
import sys
from unittest.mock import Mock, patch

import pytest

from prodrun.execution.runner import ProcessRunner
from prodrun.models import ExecutionResult, VerbositySettings
from prodrun.validation import ExecutionEnvironmentError, LaunchError, ProcessExitError

QUIET = VerbositySettings(forward_stdout=False, forward_stderr=False)
VERBOSE = VerbositySettings(forward_stdout=True, forward_stderr=True)


def python_command(code: str):
    return [sys.executable, "-c", code]


@pytest.mark.integration
class TestProcessRunner:
    """Test cases for ProcessRunner.run against real processes."""

    def test_successful_process(self, temp_dir):
        result = ProcessRunner().run(python_command("pass"), temp_dir, None, QUIET)

        assert result.exit_code == 0
        assert result.normal is True
        assert result.command_line == python_command("pass")

    def test_non_zero_exit_is_data_not_an_error(self, temp_dir):
        result = ProcessRunner().run(python_command("raise SystemExit(3)"), temp_dir, None, QUIET)

        assert result.exit_code == 3
        assert result.normal is False

    def test_runs_in_working_directory(self, temp_dir):
        code = "import os, pathlib; pathlib.Path('cwd.txt').write_text(os.getcwd())"

        ProcessRunner().run(python_command(code), temp_dir, None, QUIET)

        assert (temp_dir / "cwd.txt").read_text() == str(temp_dir)

    def test_environment_overrides_are_merged(self, temp_dir):
        code = (
            "import os, sys; "
            "sys.exit(0 if os.environ['PRODRUN_TEST'] == 'yes' and 'PATH' in os.environ else 1)"
        )

        result = ProcessRunner().run(python_command(code), temp_dir, {"PRODRUN_TEST": "yes"}, QUIET)

        assert result.exit_code == 0

    def test_forwarded_streams_reach_our_output(self, temp_dir, capfd):
        code = "import sys; print('to-stdout'); print('to-stderr', file=sys.stderr)"

        ProcessRunner().run(python_command(code), temp_dir, None, VERBOSE)

        captured = capfd.readouterr()
        assert "to-stdout" in captured.out
        assert "to-stderr" in captured.err

    def test_swallowed_streams_are_discarded(self, temp_dir, capfd):
        code = "import sys; print('to-stdout'); print('to-stderr', file=sys.stderr)"

        ProcessRunner().run(python_command(code), temp_dir, None, QUIET)

        captured = capfd.readouterr()
        assert "to-stdout" not in captured.out
        assert "to-stderr" not in captured.err

    def test_stderr_only(self, temp_dir, capfd):
        code = "import sys; print('to-stdout'); print('to-stderr', file=sys.stderr)"
        settings = VerbositySettings(forward_stdout=False, forward_stderr=True)

        ProcessRunner().run(python_command(code), temp_dir, None, settings)

        captured = capfd.readouterr()
        assert "to-stdout" not in captured.out
        assert "to-stderr" in captured.err

    def test_missing_working_directory_fails_before_spawning(self, temp_dir):
        with patch("prodrun.execution.runner.subprocess.run") as mock_run:
            with pytest.raises(ExecutionEnvironmentError):
                ProcessRunner().run(["/bin/true"], temp_dir / "missing", None, QUIET)

        mock_run.assert_not_called()

    def test_unstartable_executable_is_a_launch_error(self, temp_dir):
        with pytest.raises(LaunchError) as exc_info:
            ProcessRunner().run([str(temp_dir / "does-not-exist")], temp_dir, None, QUIET)

        assert exc_info.value.phase == "launch"
        assert isinstance(exc_info.value.__cause__, OSError)


@pytest.mark.unit
class TestProcessRunnerStreams:
    """Check the stream wiring without starting a process."""

    @pytest.mark.parametrize(
        "settings, expected_stdout, expected_stderr",
        [
            (QUIET, subprocess.DEVNULL, subprocess.DEVNULL),
            (VERBOSE, None, None),
            (VerbositySettings(False, True), subprocess.DEVNULL, None),
        ],
    )
    def test_stream_targets(self, temp_dir, settings, expected_stdout, expected_stderr):
        with patch("prodrun.execution.runner.subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0)

            ProcessRunner().run(["tool"], temp_dir, None, settings)

        kwargs = mock_run.call_args.kwargs
        assert kwargs["stdout"] == expected_stdout
        assert kwargs["stderr"] == expected_stderr
        assert kwargs["check"] is False


@pytest.mark.unit
class TestExecutionResult:
    """Test cases for ExecutionResult."""

    def test_normal_result_asserts_cleanly(self):
        result = ExecutionResult(exit_code=0, command_line=["tool"])

        assert result.assert_normal_exit_value() is result

    def test_non_zero_result_raises_with_code(self):
        result = ExecutionResult(exit_code=2, command_line=["tool", "arg with space"])

        with pytest.raises(ProcessExitError) as exc_info:
            result.assert_normal_exit_value()

        assert exc_info.value.exit_code == 2
        assert "'arg with space'" in str(exc_info.value)
