"""
Quasi-Newton minimizers (BFGS and L-BFGS) with an objective-call budget.

Both share one driver loop; they differ only in how the inverse Hessian is
approximated. The loop starts over from steepest descent whenever the
approximation stops producing descent directions or a step fails to lower
the objective.
"""

from __future__ import annotations

import inspect
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, List, Optional

import numpy as np

from .line_search import wolfe_line_search
from .utils import Array, Gradient, ObjectiveFn, compute_gradient

# curvature pairs with y.s below this are skipped
_MIN_CURVATURE = 1e-12
# no gradient tolerance is honoured below this
_TOL_FLOOR = 1e-10


@dataclass(frozen=True)
class Problem:
    """An unconstrained cost on a flat float vector.

    ``grad`` is optional; without it every gradient is a central difference
    and its evaluations count against ``maxfev``.
    """

    fun: ObjectiveFn
    grad: Optional[Gradient] = None
    dim: Optional[int] = None


@dataclass
class OptimizeResult:
    """
    Where :func:`bfgs` or :func:`lbfgs` stopped, and what it cost.

    ``success`` means the gradient norm met the tolerance. ``nfev`` includes
    finite-difference evaluations and ``njev`` counts analytic gradients.
    """

    x: Array
    fun: float
    nit: int
    success: bool
    message: str
    grad_norm: float
    nfev: int
    njev: int
    reached_maxfev: bool = False
    history: List[Array] = field(default_factory=list)


class _DenseInverseHessian:
    """Full BFGS approximation of the inverse Hessian."""

    def __init__(self, n: int) -> None:
        self.n = n
        self.matrix = np.eye(n)

    def direction(self, grad: np.ndarray) -> np.ndarray:
        return -self.matrix @ grad

    def update(self, s: np.ndarray, y: np.ndarray) -> None:
        sy = float(np.dot(s, y))
        if sy <= _MIN_CURVATURE:
            self.reset()
            return
        hy = self.matrix @ y
        yhy = float(np.dot(y, hy))
        # H+ = H + ((sy + yHy) ss^T) / sy^2 - (Hy s^T + s y^T H) / sy
        self.matrix = (
            self.matrix
            + (sy + yhy) * np.outer(s, s) / (sy * sy)
            - (np.outer(hy, s) + np.outer(s, hy)) / sy
        )

    def reset(self) -> None:
        self.matrix = np.eye(self.n)


class _LimitedMemoryInverseHessian:
    """L-BFGS approximation from the ``m`` most recent curvature pairs."""

    def __init__(self, m: int) -> None:
        self.pairs: Deque[tuple[np.ndarray, np.ndarray, float]] = deque(maxlen=m)

    def direction(self, grad: np.ndarray) -> np.ndarray:
        q = np.array(grad, dtype=float, copy=True)
        coefficients = []
        for s, y, rho in reversed(self.pairs):
            a = rho * float(np.dot(s, q))
            q -= a * y
            coefficients.append(a)
        if self.pairs:
            s, y, _ = self.pairs[-1]
            q *= float(np.dot(s, y)) / float(np.dot(y, y))
        for (s, y, rho), a in zip(self.pairs, reversed(coefficients)):
            b = rho * float(np.dot(y, q))
            q += (a - b) * s
        return -q

    def update(self, s: np.ndarray, y: np.ndarray) -> None:
        sy = float(np.dot(s, y))
        if sy > _MIN_CURVATURE:
            self.pairs.append((s, y, 1.0 / sy))

    def reset(self) -> None:
        self.pairs.clear()


class _Counter:
    """Evaluation bookkeeping shared by the minimizer loops."""

    def __init__(self, problem: Problem, maxfev: Optional[int]) -> None:
        self.problem = problem
        self.maxfev = maxfev
        self.nfev = 0
        self.njev = 0

    def fun(self, x: np.ndarray) -> float:
        self.nfev += 1
        return float(self.problem.fun(x))

    def grad(self, x: np.ndarray) -> np.ndarray:
        g, fe, je = compute_gradient(self.problem, x)
        self.nfev += fe
        self.njev += je
        return g

    @property
    def exhausted(self) -> bool:
        return self.maxfev is not None and self.nfev >= self.maxfev


def _takes_gradient(line_search: Callable) -> bool:
    params = list(inspect.signature(line_search).parameters)
    return len(params) >= 2 and params[1] == "grad"


def _minimize(
    problem: Problem,
    x0: np.ndarray,
    approx,
    maxiter: int,
    tol: float,
    line_search: Callable,
    history: bool,
    maxfev: Optional[int],
) -> OptimizeResult:
    counter = _Counter(problem, maxfev)
    x = np.array(x0, dtype=float, copy=True)
    trajectory = [x.copy()] if history else []
    fx = counter.fun(x)
    grad = counter.grad(x)
    with_grad = _takes_gradient(line_search)

    nit = 0
    success = False
    reached_maxfev = False
    message = "Maximum iterations reached."
    fresh = True

    while nit < maxiter:
        if float(np.linalg.norm(grad)) <= max(tol, _TOL_FLOOR):
            success = True
            message = "Gradient tolerance satisfied."
            break
        if counter.exhausted:
            reached_maxfev = True
            message = "Maximum function evaluations reached."
            break

        p = approx.direction(grad)
        if float(np.dot(p, grad)) >= 0:
            approx.reset()
            fresh = True
            p = -grad
        # the counter tallies evaluations; the returned count is redundant
        if with_grad:
            alpha, _ = line_search(counter.fun, counter.grad, x, p, fx=fx, gx=grad)
        else:
            alpha, _ = line_search(counter.fun, x, p, grad, fx=fx)
        step = alpha * p
        x_new = x + step
        f_new = counter.fun(x_new)
        nit += 1

        if not np.isfinite(f_new) or f_new > fx:
            if fresh:
                message = "Line search failed to decrease the objective."
                break
            approx.reset()
            fresh = True
            continue

        grad_new = counter.grad(x_new)
        approx.update(step, grad_new - grad)
        fresh = False
        x, fx, grad = x_new, f_new, grad_new
        if history:
            trajectory.append(x.copy())

    return OptimizeResult(
        x=x,
        fun=float(fx),
        nit=nit,
        success=success,
        message=message,
        grad_norm=float(np.linalg.norm(grad)),
        nfev=counter.nfev,
        njev=counter.njev,
        reached_maxfev=reached_maxfev,
        history=trajectory,
    )


def bfgs(
    problem: Problem,
    x0: np.ndarray,
    maxiter: int = 1000,
    tol: float = 1e-8,
    line_search: Callable = wolfe_line_search,
    history: bool = False,
    maxfev: Optional[int] = None,
) -> OptimizeResult:
    """Full-memory BFGS with strong Wolfe line search.

    ``maxfev`` bounds the objective evaluations; it is checked once per
    iteration, so a single iteration may run past it.
    """
    n = np.asarray(x0).size
    return _minimize(
        problem, x0, _DenseInverseHessian(n), maxiter, tol, line_search, history, maxfev
    )


def lbfgs(
    problem: Problem,
    x0: np.ndarray,
    m: int = 10,
    maxiter: int = 1000,
    tol: float = 1e-8,
    line_search: Callable = wolfe_line_search,
    history: bool = False,
    maxfev: Optional[int] = None,
) -> OptimizeResult:
    """Limited-memory BFGS using the two-loop recursion."""
    if m <= 0:
        raise ValueError("Memory parameter m must be positive.")
    return _minimize(
        problem,
        x0,
        _LimitedMemoryInverseHessian(m),
        maxiter,
        tol,
        line_search,
        history,
        maxfev,
    )


__all__ = ["Problem", "OptimizeResult", "bfgs", "lbfgs"]
