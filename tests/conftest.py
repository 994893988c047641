"""
Pytest configuration and shared fixtures for trie tests.

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

make_trie = _common.make_trie
make_dataset = _common.make_dataset
make_hashed_trie = _common.make_hashed_trie


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def two_key_trie():
    """Trie with keys 010203 -> hello and 0102030405 -> world."""
    return make_trie()


@pytest.fixture
def puppy_trie():
    """Trie holding the Ethereum 'puppy' reference vector."""
    return make_trie(_common.PUPPY_ITEMS)


@pytest.fixture
def dataset():
    """64 generated pairs with shared prefixes and non-inlined values."""
    return make_dataset()


@pytest.fixture
def hashed_trie():
    """(trie, key1, key2) where every node below the root is hashed."""
    return make_hashed_trie()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run in an empty directory with no MPT_* variables or user config."""
    for name in ["MPT_LOG_LEVEL", "MPT_LOG_FILE", "MPT_OUTPUT_FORMAT", "MPT_CHECK_HASHES"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


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
