"""Pytest configuration and shared fixtures for unconopt tests.

This module provides:
- A deterministic numpy RNG fixture
- Isolation of the global debug-mode flag between tests
"""

import os

import numpy as np
import pytest

from unconopt.diagnostics import is_debug_enabled, set_debug_enabled


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    This keeps tests reproducible while allowing override for debugging.
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function", autouse=True)
def restore_debug_mode():
    """Undo any debug-mode toggling a test performs."""
    original = is_debug_enabled()
    yield
    set_debug_enabled(original)
