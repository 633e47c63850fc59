"""Tests for core diagnostic functions."""

import math

import pytest

from profilecross import ParameterState, assert_good_standing, in_good_standing
from profilecross.diagnostics import assert_finite, is_finite


@pytest.fixture
def state() -> ParameterState:
    state = ParameterState()
    state.add("free", 0.0, 1.0)
    state.add("fixed", 0.0, 1.0)
    state.add("outside", 2.0, 1.0, upper=3.0)
    state.fix("fixed")
    state.set_limits("outside", upper=1.0)
    return state


def test_is_finite() -> None:
    """Test is_finite on finite and non-finite numbers."""
    assert is_finite(1.0)
    assert not is_finite(math.nan)
    assert not is_finite(-math.inf)


def test_assert_finite_raises_with_name() -> None:
    """Test that assert_finite names the offending value."""
    assert_finite(0.0, "fmin")
    with pytest.raises(ValueError, match="fmin must be finite"):
        assert_finite(math.inf, "fmin")


def test_in_good_standing(state) -> None:
    """Only free parameters inside their limits are in good standing."""
    assert in_good_standing(state, 0)
    assert not in_good_standing(state, 1)
    assert not in_good_standing(state, 2)


def test_assert_good_standing(state) -> None:
    """Test that assert_good_standing explains the failure."""
    assert_good_standing(state, [0])
    with pytest.raises(ValueError, match="fixed"):
        assert_good_standing(state, [0, 1])
    with pytest.raises(ValueError, match="outside its limits"):
        assert_good_standing(state, [2])
