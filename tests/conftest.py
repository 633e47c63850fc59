"""Pytest configuration and shared fixtures for profilecross tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- Small objectives with known minima and crossings
"""

import os

import numpy as np
import pytest
import torch

from profilecross import FunctionObjective, ParameterState, set_debug_enabled


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Seed the global numpy and torch generators for every test."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())


@pytest.fixture(scope="function", autouse=True)
def debug_off():
    """Run every test with debug mode off, whatever the environment says."""
    set_debug_enabled(False)
    yield
    set_debug_enabled(False)


@pytest.fixture
def parabola():
    """f(x) = (x - 2)^2, minimum 0 at x = 2, crossings at 1 and 3."""
    state = ParameterState()
    state.add("x", 2.0, 1.0)
    objective = FunctionObjective(lambda p: (p[0] - 2.0) ** 2, up=1.0)
    return objective, state


@pytest.fixture
def correlated_gaussian():
    """Two-parameter chi-square with correlation rho = 0.6 and unit widths.

    The profile of either parameter is a parabola whose crossings lie one
    standard deviation (1.0) from the minimum at (1, -1), while the
    parabolic error at fixed other parameter is sqrt(1 - rho^2) = 0.8.
    """
    rho = 0.6
    cov = np.array([[1.0, rho], [rho, 1.0]])
    inv = np.linalg.inv(cov)
    mean = np.array([1.0, -1.0])

    def chi2(p: np.ndarray) -> float:
        d = p - mean
        return float(d @ inv @ d)

    def grad(p: np.ndarray) -> np.ndarray:
        return 2.0 * inv @ (p - mean)

    state = ParameterState()
    state.add("a", 1.0, 0.8)
    state.add("b", -1.0, 0.8)
    return FunctionObjective(chi2, up=1.0, grad=grad), state
