"""
Unit tests for host-specific command decoration.
"""

import pytest

from prodrun.models import CommandLine, OsFamily
from prodrun.system.platform import (
    MACOS_FIRST_THREAD_FLAG,
    XVFB_RUN_EXECUTABLE,
    decorate_command,
    detect_os_family,
    should_use_xvfb,
)
from prodrun.validation import ExecutionEnvironmentError, UnsupportedOperationError


@pytest.fixture
def java_command():
    return CommandLine(
        executable="/opt/java/bin/java",
        runtime_flags=("-Xmx1G",),
        main_class="Main",
        program_args=("--gameDir", "/run"),
    )


@pytest.mark.unit
class TestDetectOsFamily:
    """Test cases for detect_os_family."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("linux", OsFamily.LINUX),
            ("linux2", OsFamily.LINUX),
            ("darwin", OsFamily.MACOS),
            ("win32", OsFamily.OTHER),
            ("freebsd13", OsFamily.OTHER),
        ],
    )
    def test_platform_names(self, name, expected):
        assert detect_os_family(name) is expected


@pytest.mark.unit
class TestShouldUseXvfb:
    """Test cases for the virtual framebuffer default."""

    def test_default_on_linux_ci(self):
        assert should_use_xvfb(OsFamily.LINUX, {"CI": "true"}) is True

    def test_default_off_on_linux_without_ci(self):
        assert should_use_xvfb(OsFamily.LINUX, {}) is False

    def test_default_off_when_ci_is_false(self):
        assert should_use_xvfb(OsFamily.LINUX, {"CI": "false"}) is False

    @pytest.mark.parametrize("family", [OsFamily.MACOS, OsFamily.OTHER])
    def test_default_off_elsewhere_even_on_ci(self, family):
        assert should_use_xvfb(family, {"CI": "true"}) is False

    def test_explicit_false_wins_on_linux_ci(self):
        assert should_use_xvfb(OsFamily.LINUX, {"CI": "true"}, use_xvfb=False) is False

    @pytest.mark.parametrize("family", [OsFamily.MACOS, OsFamily.OTHER])
    def test_forced_on_non_linux_is_unsupported(self, family):
        with pytest.raises(UnsupportedOperationError):
            should_use_xvfb(family, {}, use_xvfb=True)


@pytest.mark.unit
class TestDecorateCommand:
    """Test cases for decorate_command."""

    def test_linux_with_xvfb_wraps_command(self, java_command):
        argv = decorate_command(java_command, OsFamily.LINUX, {}, use_xvfb=True).to_argv()

        assert argv[:2] == [XVFB_RUN_EXECUTABLE, "-a"]
        assert argv[2] == "/opt/java/bin/java"
        assert argv[3:] == java_command.to_argv()[1:]

    def test_linux_ci_defaults_to_xvfb(self, java_command):
        argv = decorate_command(java_command, OsFamily.LINUX, {"CI": "1"}).to_argv()

        assert argv[0] == XVFB_RUN_EXECUTABLE

    def test_linux_without_xvfb_is_identity(self, java_command):
        assert decorate_command(java_command, OsFamily.LINUX, {}) == java_command

    def test_macos_adds_first_thread_flag_to_runtime_flags(self, java_command):
        decorated = decorate_command(java_command, OsFamily.MACOS, {"CI": "true"})

        assert decorated.runtime_flags == ("-Xmx1G", MACOS_FIRST_THREAD_FLAG)
        assert decorated.wrapper == ()
        argv = decorated.to_argv()
        assert argv.index(MACOS_FIRST_THREAD_FLAG) < argv.index("Main")

    def test_macos_forced_xvfb_raises(self, java_command):
        with pytest.raises(UnsupportedOperationError) as exc_info:
            decorate_command(java_command, OsFamily.MACOS, {}, use_xvfb=True)

        assert isinstance(exc_info.value, ExecutionEnvironmentError)

    def test_other_platforms_unchanged(self, java_command):
        assert decorate_command(java_command, OsFamily.OTHER, {"CI": "true"}) == java_command

    def test_input_command_is_not_modified(self, java_command):
        decorate_command(java_command, OsFamily.MACOS, {})

        assert java_command.runtime_flags == ("-Xmx1G",)
