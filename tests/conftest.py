"""Pytest configuration and shared fixtures for fusionopt tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- Debug mode reset between tests
"""

import os

import numpy as np
import pytest
import torch

from fusionopt.diagnostics import is_debug_enabled, set_debug_enabled


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Provide a deterministic torch RNG for tests."""
    generator = torch.Generator()
    generator.manual_seed(_seed())
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Set global random seeds so every test runs deterministically."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())


@pytest.fixture(scope="function", autouse=True)
def restore_debug_mode():
    """Restore the global debug flag after each test."""
    original = is_debug_enabled()
    yield
    set_debug_enabled(original)
