"""Gradients for problems that do not supply one."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import numpy as np

if TYPE_CHECKING:
    from .quasi_newton import Problem

Array = np.ndarray
ObjectiveFn = Callable[[Array], float]
Gradient = Callable[[Array], Array]


def approx_grad(
    fun: ObjectiveFn, x: Array, eps: float = 1e-6, return_evals: bool = False
) -> Array | tuple[Array, int]:
    """Central-difference gradient of ``fun`` at ``x``.

    Coordinate ``i`` is perturbed by ``eps * max(1, |x_i|)``, so large
    parameter values get proportionally large steps. Costs ``2 * x.size``
    calls of ``fun``.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    x = np.asarray(x, dtype=float)
    steps = eps * np.maximum(1.0, np.abs(x))
    grad = np.empty_like(x)
    for i, h in enumerate(steps):
        shift = np.zeros_like(x)
        shift[i] = h
        grad[i] = (fun(x + shift) - fun(x - shift)) / (2.0 * h)
    if return_evals:
        return grad, 2 * x.size
    return grad


def compute_gradient(problem: Problem, x: Array) -> tuple[Array, int, int]:
    """Gradient of ``problem`` at ``x`` with the (objective, gradient) calls it cost."""
    if problem.grad is not None:
        return np.asarray(problem.grad(x), dtype=float), 0, 1
    grad, nfev = approx_grad(problem.fun, x, return_evals=True)
    return grad, nfev, 0


__all__ = ["Array", "ObjectiveFn", "Gradient", "approx_grad", "compute_gradient"]
