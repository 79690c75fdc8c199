"""
Pytest configuration and shared fixtures for picopak tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Isolates tests from the caller's picopak environment variables
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_manifest_doc = _common.make_manifest_doc
make_array_index = _common.make_array_index
make_map_index = _common.make_map_index
write_package_dir = _common.write_package_dir

PICOPAK_ENV_VARS = (
    "PICO_PAK_INDEX_URLS",
    "PICO_PAK_INDEX_URL",
    "PICO_PLATFORM",
    "PICOPAK_HTTP_TIMEOUT",
    "PICOPAK_LOG_LEVEL",
    "PICOPAK_LOG_FILE",
)


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run every test without picopak env vars, from a scratch working directory."""
    for name in PICOPAK_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def source_manifest():
    """Provide a complete source-tier manifest document."""
    return make_manifest_doc()


@pytest.fixture
def fastled_index():
    """Provide the FastLED index (3.10.1, 3.10.2, 3.10.3-rc1) in the array shape."""
    return make_array_index()


@pytest.fixture
def fastled_map_index():
    """Provide the FastLED index in the map shape with map releases."""
    return make_map_index()


@pytest.fixture
def package_dir(tmp_path, source_manifest):
    """Provide a packable source-tier package directory."""
    return write_package_dir(tmp_path / "src" / "FastLED", source_manifest)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
