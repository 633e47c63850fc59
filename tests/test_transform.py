"""Tests for the bounded-parameter internal coordinates."""

import numpy as np
import pytest

from profilecross import Parameter, ParameterState, ParameterTransform
from profilecross.transform import to_external, to_internal

PARAMS = [
    Parameter("free", 0.3, 1.0),
    Parameter("both", 0.3, 1.0, lower=-1.0, upper=2.0),
    Parameter("lower", 0.3, 1.0, lower=-1.0),
    Parameter("upper", 0.3, 1.0, upper=2.0),
]


@pytest.mark.parametrize("param", PARAMS, ids=lambda p: p.name)
def test_external_value_survives_round_trip(param):
    for value in (-0.9, 0.3, 1.9):
        assert to_external(param, to_internal(param, value)) == pytest.approx(value)


@pytest.mark.parametrize("param", PARAMS[1:], ids=lambda p: p.name)
def test_every_internal_value_is_allowed(param):
    for internal in np.linspace(-50.0, 50.0, 201):
        assert param.within_limits(to_external(param, internal))


def test_values_beyond_limits_map_onto_limit():
    param = Parameter("x", 0.0, 1.0, lower=-1.0, upper=1.0)
    assert to_external(param, to_internal(param, 3.0)) == pytest.approx(1.0)


def test_transform_covers_free_parameters_only():
    state = ParameterState(PARAMS)
    state.fix("lower")
    transform = ParameterTransform(state)
    assert transform.free == [0, 1, 3]
    assert transform.dim == 3

    internal = transform.to_internal()
    assert internal.shape == (3,)
    np.testing.assert_allclose(transform.to_external(internal), state.values)

    moved = transform.to_external(np.array([5.0, 100.0, 100.0]))
    assert moved[0] == 5.0
    assert moved[2] == 0.3
    assert state["both"].within_limits(moved[1])
    assert state["upper"].within_limits(moved[3])
