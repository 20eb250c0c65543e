"""
Pytest configuration and shared fixtures for the prodrun test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules in the prodrun project.
"""

import shutil
import stat
import sys
import tempfile
from pathlib import Path

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def make_script(temp_dir):
    """
    Factory writing an executable /bin/sh script into the temp directory.

    The companion command line passes ``-a 127.0.0.1 -f -o <output>``, so
    scripts can read the output path from ``$5``.
    """

    def _make(name: str, body: str) -> Path:
        path = temp_dir / name
        path.write_text("#!/bin/sh\n" + body + "\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "general": {
            "log_level": "lifecycle",
            "stacktrace": "internal",
        },
        "profiles": {
            "client": {
                "role": "client",
                "run_dir": "run/client",
                "jvm_args": ["-Xmx1G"],
                "mods": ["mods/example.jar"],
                "classpath": ["libs/a.jar", "libs/b.jar"],
                "asset_index": "17",
                "assets_dir": "assets",
            },
            "server": {
                "role": "server",
                "run_dir": "run/server",
                "loader_version": "0.16.10",
                "minecraft_version": "1.21.4",
            },
            "echo": {
                "role": "tool",
                "executable": "/bin/echo",
                "run_dir": "run/echo",
                "program_args": ["hello"],
            },
        },
        "companion": {
            "executable": "",
            "output": "run/capture.tracy",
            "max_shutdown_wait_seconds": 3,
        },
    }


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config_files(temp_dir, sample_config_data):
    """Write the sample configuration to a temporary config.toml."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump(sample_config_data, f)

    return {
        "config": config_file,
        "dir": temp_dir,
    }


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration cache after each test."""
    original_config_path = Path(__file__).parent.parent / "conf" / "config.toml"

    yield  # Run the test

    from prodrun.config import clear_config_cache, set_config_path

    clear_config_cache()
    set_config_path(original_config_path)
