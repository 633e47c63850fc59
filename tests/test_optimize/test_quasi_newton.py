"""Tests for the BFGS and L-BFGS minimizers."""

import numpy as np
import pytest

from profilecross.optimize import OptimizeResult, Problem, backtracking_armijo, bfgs, lbfgs


def rosenbrock(x: np.ndarray) -> float:
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def rosenbrock_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


@pytest.fixture
def rosen_problem() -> Problem:
    return Problem(fun=rosenbrock, grad=rosenbrock_grad, dim=2)


@pytest.fixture
def correlated_quadratic():
    a = np.array([[4.0, 1.2, 0.0], [1.2, 2.0, -0.5], [0.0, -0.5, 1.0]])
    b = np.array([1.0, -2.0, 0.5])
    return Problem(fun=lambda x: 0.5 * x @ a @ x - b @ x, grad=lambda x: a @ x - b, dim=3), a, b


@pytest.mark.parametrize("method", [bfgs, lbfgs])
def test_rosenbrock(method, rosen_problem):
    res = method(rosen_problem, np.array([-1.2, 1.0]), maxiter=300)
    assert res.success
    np.testing.assert_allclose(res.x, np.ones(2), atol=1e-5)
    assert res.fun < 1e-9
    assert res.njev > 0


@pytest.mark.parametrize("method", [bfgs, lbfgs])
def test_quadratic_reaches_linear_solution(method, correlated_quadratic):
    problem, a, b = correlated_quadratic
    res = method(problem, np.zeros(3), tol=1e-7)
    assert res.success
    np.testing.assert_allclose(res.x, np.linalg.solve(a, b), atol=1e-6)


def test_bfgs_is_exact_on_quadratic_in_few_steps(correlated_quadratic):
    problem, a, b = correlated_quadratic
    res = bfgs(problem, np.zeros(3), tol=1e-7)
    assert res.success
    assert res.nit <= 20


def test_numerical_gradient_fallback():
    res = bfgs(Problem(fun=rosenbrock, dim=2), np.array([-1.2, 1.0]), maxiter=300, tol=1e-5)
    assert res.fun < 1e-6
    assert res.njev == 0
    assert res.nfev > res.nit


def test_armijo_line_search(correlated_quadratic):
    problem, a, b = correlated_quadratic
    res = bfgs(problem, np.zeros(3), line_search=backtracking_armijo, tol=1e-7)
    assert res.success
    np.testing.assert_allclose(res.x, np.linalg.solve(a, b), atol=1e-6)


def test_evaluation_budget(rosen_problem):
    res = bfgs(rosen_problem, np.array([-1.2, 1.0]), maxiter=500, maxfev=20)
    assert not res.success
    assert res.reached_maxfev
    assert res.message == "Maximum function evaluations reached."
    assert res.nfev >= 20


def test_iteration_limit(rosen_problem):
    res = lbfgs(rosen_problem, np.array([-1.2, 1.0]), maxiter=3)
    assert not res.success
    assert not res.reached_maxfev
    assert res.nit == 3


def test_trajectory():
    problem = Problem(fun=lambda x: float(x @ x), grad=lambda x: 2 * x, dim=2)
    res = bfgs(problem, np.array([1.0, -1.0]), history=True)
    assert res.success
    assert res.nit == 1
    np.testing.assert_allclose(res.history[0], [1.0, -1.0])
    np.testing.assert_allclose(res.history[-1], [0.0, 0.0], atol=1e-12)


def test_zero_tolerance_is_floored():
    problem = Problem(fun=lambda x: float(x @ x), grad=lambda x: 2 * x, dim=2)
    res = bfgs(problem, np.array([1.0, -1.0]), tol=0.0)
    assert isinstance(res, OptimizeResult)
    assert res.success
    assert res.message == "Gradient tolerance satisfied."
    assert res.grad_norm <= 1e-10


def test_non_finite_objective_stops():
    res = bfgs(Problem(fun=lambda x: float("nan"), dim=1), np.array([0.0]))
    assert not res.success
    assert "failed" in res.message


def test_lbfgs_memory_must_be_positive(rosen_problem):
    with pytest.raises(ValueError):
        lbfgs(rosen_problem, np.zeros(2), m=0)
