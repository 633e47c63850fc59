"""Objective-function interfaces consumed by the minimizers and the crossing search."""

from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

import numpy as np

Array = np.ndarray


@runtime_checkable
class Objective(Protocol):
    """
    Scalar cost of a full parameter vector, lower is better.

    ``up`` is the increase of the cost that defines one confidence unit,
    e.g. 1.0 for a chi-square and 0.5 for a negative log-likelihood.
    """

    up: float

    def evaluate(self, x: Array) -> float: ...


class FunctionObjective:
    """Objective built from a plain callable on NumPy vectors."""

    def __init__(
        self,
        fun: Callable[[Array], float],
        up: float = 1.0,
        grad: Optional[Callable[[Array], Array]] = None,
    ) -> None:
        if not up > 0:
            raise ValueError(f"up must be positive, got {up}")
        self.fun = fun
        self.grad = grad
        self.up = float(up)
        self.ncalls = 0

    @property
    def has_gradient(self) -> bool:
        return self.grad is not None

    def evaluate(self, x: Array) -> float:
        self.ncalls += 1
        return float(self.fun(np.asarray(x, dtype=float)))

    def gradient(self, x: Array) -> Array:
        if self.grad is None:
            raise ValueError("This objective has no analytic gradient.")
        return np.asarray(self.grad(np.asarray(x, dtype=float)), dtype=float)

    __call__ = evaluate


def has_gradient(objective: Objective) -> bool:
    """Return True if ``objective`` provides an analytic gradient."""
    flag = getattr(objective, "has_gradient", None)
    if flag is not None:
        return bool(flag)
    return callable(getattr(objective, "gradient", None))


__all__ = ["Array", "Objective", "FunctionObjective", "has_gradient"]
