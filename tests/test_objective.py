"""Tests for objective wrappers."""

import numpy as np
import pytest
import torch

from profilecross import FunctionObjective, Objective
from profilecross.objective import has_gradient
from profilecross.torch import TorchObjective


def test_function_objective_counts_calls():
    objective = FunctionObjective(lambda p: float(np.sum(p**2)), up=0.5)
    assert objective.evaluate(np.array([1.0, 2.0])) == 5.0
    assert objective(np.array([0.0, 0.0])) == 0.0
    assert objective.ncalls == 2
    assert objective.up == 0.5
    assert isinstance(objective, Objective)


def test_function_objective_gradient():
    objective = FunctionObjective(lambda p: float(p @ p), grad=lambda p: 2.0 * p)
    assert has_gradient(objective)
    np.testing.assert_allclose(objective.gradient(np.array([1.0, -2.0])), [2.0, -4.0])


def test_missing_gradient_raises():
    objective = FunctionObjective(lambda p: 0.0)
    assert not has_gradient(objective)
    with pytest.raises(ValueError, match="gradient"):
        objective.gradient(np.zeros(1))


def test_up_must_be_positive():
    with pytest.raises(ValueError):
        FunctionObjective(lambda p: 0.0, up=0.0)
    with pytest.raises(ValueError):
        TorchObjective(lambda p: p.sum(), up=-1.0)


def test_torch_objective_value_and_gradient():
    objective = TorchObjective(lambda p: (p**2).sum() + p[0] * p[1])
    x = np.array([1.0, 2.0])
    assert objective.evaluate(x) == pytest.approx(7.0)
    np.testing.assert_allclose(objective.gradient(x), [4.0, 5.0])
    assert has_gradient(objective)
    assert objective.ncalls == 1
    assert isinstance(objective, Objective)


def test_torch_objective_default_dtype_is_double():
    seen = []

    def fun(p: torch.Tensor) -> torch.Tensor:
        seen.append(p.dtype)
        return p.sum()

    TorchObjective(fun).evaluate(np.ones(2))
    assert seen == [torch.float64]


def test_torch_objective_rejects_non_scalar():
    objective = TorchObjective(lambda p: p * 2.0)
    with pytest.raises(ValueError, match="scalar"):
        objective.gradient(np.ones(2))
