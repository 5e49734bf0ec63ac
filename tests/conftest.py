"""
Pytest configuration and shared fixtures.

This module provides central pytest configuration, custom markers,
and shared fixtures for the sexec test suite.
"""

import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

# =============================================================================
# Plugin Registration
# =============================================================================

pytest_plugins = [
    "tests.fixtures.logging",
]


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (spawn real shell processes)"
    )
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "slow: Tests that take >1 second to run")


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Provide a temporary directory that is cleaned up after the test.

    Yields:
        Path: Temporary directory path
    """
    temp_path = Path(tempfile.mkdtemp(prefix="sexec-test-"))
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_config_dict() -> dict:
    """
    Provide a sample configuration dictionary for testing.

    Returns:
        dict: Sample configuration
    """
    return {
        "process": {
            "shell": "/bin/sh",
            "args": ["-c"],
            "inherit": False,
            "env": {"LANG": "C", "DEPTH": 3},
        },
        "logging": {
            "level": "debug",
            "location": 1,
            "colors": {"enabled": False},
        },
    }


# =============================================================================
# Test Collection Hooks
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """Add 'unit' marker to tests without other markers."""
    for item in items:
        if not any(
            mark.name in ["integration", "property"] for mark in item.iter_markers()
        ):
            item.add_marker(pytest.mark.unit)
