"""
Unit tests for Java executable lookup.
"""

import os
import stat

import pytest

from prodrun.system.toolchain import resolve_java_executable
from prodrun.validation import ConfigurationError

pytestmark = pytest.mark.skipif(os.name != "posix", reason="uses POSIX executable names")


def _fake_java(directory):
    directory.mkdir(parents=True, exist_ok=True)
    java = directory / "java"
    java.write_text("#!/bin/sh\n")
    java.chmod(java.stat().st_mode | stat.S_IXUSR)
    return java


@pytest.mark.unit
class TestResolveJavaExecutable:
    """Test cases for resolve_java_executable."""

    def test_explicit_path_is_used_as_is(self):
        assert resolve_java_executable("/custom/java", env={}) == "/custom/java"

    def test_java_home_is_preferred_over_path(self, temp_dir):
        home_java = _fake_java(temp_dir / "jdk" / "bin")
        _fake_java(temp_dir / "path")

        env = {"JAVA_HOME": str(temp_dir / "jdk"), "PATH": str(temp_dir / "path")}

        assert resolve_java_executable(None, env=env) == str(home_java)

    def test_falls_back_to_path(self, temp_dir):
        path_java = _fake_java(temp_dir / "path")

        env = {"JAVA_HOME": str(temp_dir / "missing"), "PATH": str(temp_dir / "path")}

        assert resolve_java_executable(None, env=env) == str(path_java)

    def test_nothing_found_is_a_configuration_error(self, temp_dir):
        with pytest.raises(ConfigurationError):
            resolve_java_executable(None, env={"PATH": str(temp_dir)})
