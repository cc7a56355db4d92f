"""
Pytest configuration and shared fixtures for relay merkle tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_common = importlib.import_module("fixtures.common")

make_leaf = _common.make_leaf
make_leaves = _common.make_leaves
make_builder = _common.make_builder
naive_root = _common.naive_root


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def leaves():
    """Provide twenty deterministic keccak leaves."""
    return make_leaves(20)


@pytest.fixture
def builder():
    """Provide an empty depth-32 builder."""
    return make_builder()


@pytest.fixture
def leaves_file(tmp_path, leaves):
    """Write the default leaves to a JSON leaf file and return its path."""
    from relay_core.leaves import dump_leaves

    path = tmp_path / "leaves.json"
    dump_leaves(leaves, path)
    return path


@pytest.fixture(autouse=True)
def _isolate_relay_env(monkeypatch):
    """Keep RELAY_* variables from the developer's shell out of tests."""
    for var in ("RELAY_TREE_DEPTH", "RELAY_HASH_FUNCTION", "RELAY_LOG_LEVEL", "RELAY_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
