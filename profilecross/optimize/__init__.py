"""Deterministic unconstrained quasi-Newton minimizers.

These drive every (re-)minimization in profilecross; bounded parameters are
handled one level up through :mod:`profilecross.transform`.

Example
-------
>>> import numpy as np
>>> from profilecross.optimize import Problem, bfgs
>>> def rosen(x):
...     return (1 - x[0])**2 + 100 * (x[1] - x[0]**2)**2
>>> res = bfgs(Problem(fun=rosen, dim=2), np.array([-1.2, 1.0]))
>>> bool(res.fun < 1e-6)
True
"""

from .line_search import backtracking_armijo, wolfe_line_search
from .quasi_newton import OptimizeResult, Problem, bfgs, lbfgs
from .utils import approx_grad, compute_gradient

__all__ = [
    "Problem",
    "OptimizeResult",
    "approx_grad",
    "backtracking_armijo",
    "bfgs",
    "compute_gradient",
    "lbfgs",
    "wolfe_line_search",
]
