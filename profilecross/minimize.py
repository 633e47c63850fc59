"""
Re-minimization of an objective over the free parameters of a state.

The crossing search only needs one capability from a minimizer: given a
:class:`~profilecross.parameters.ParameterState` with some parameters fixed,
return the minimum over the remaining free ones. :class:`Reminimizer` is that
interface; :class:`QuasiNewtonReminimizer` implements it with the BFGS /
L-BFGS engine of :mod:`profilecross.optimize`, working in bounded internal
coordinates and honouring a hard objective-call budget. It is also the
minimizer used to produce the initial minimum.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import numpy as np

from .logging import get_logger
from .objective import Objective, has_gradient
from .optimize import Problem, bfgs, lbfgs
from .parameters import ParameterState
from .strategy import Strategy
from .transform import ParameterTransform

logger = get_logger(__name__)

# fraction of a parameter error used to move a start value off its limit
_LIMIT_NUDGE = 1e-2


@dataclass(frozen=True)
class Reminimization:
    """Outcome of one (re-)minimization run."""

    state: ParameterState
    fval: float
    is_valid: bool
    nfcn: int
    reached_call_limit: bool = False
    message: str = ""


@runtime_checkable
class Reminimizer(Protocol):
    """Anything that can minimize an objective over a state's free parameters."""

    def reminimize(
        self, state: ParameterState, max_calls: Optional[int] = None
    ) -> Reminimization: ...


class _BudgetExhausted(Exception):
    pass


class _BudgetedFunction:
    """Objective in internal coordinates that stops at the call budget."""

    def __init__(
        self,
        objective: Objective,
        transform: ParameterTransform,
        max_calls: Optional[int],
    ) -> None:
        self.objective = objective
        self.transform = transform
        self.max_calls = max_calls
        self.ncalls = 0
        self.best_x: Optional[np.ndarray] = None
        self.best_f = math.inf

    def __call__(self, internal: np.ndarray) -> float:
        if self.max_calls is not None and self.ncalls >= self.max_calls:
            raise _BudgetExhausted()
        self.ncalls += 1
        fval = float(self.objective.evaluate(self.transform.to_external(internal)))
        if math.isfinite(fval) and fval < self.best_f:
            self.best_f = fval
            self.best_x = np.array(internal, dtype=float, copy=True)
        return fval

    def gradient(self, internal: np.ndarray) -> np.ndarray:
        """Chain rule through the internal transform for analytic gradients."""
        eps = 1e-7
        external = self.transform.to_external(internal)
        grad_ext = np.asarray(self.objective.gradient(external), dtype=float)
        jac = np.empty(self.transform.dim, dtype=float)
        for k, i in enumerate(self.transform.free):
            shifted = np.array(internal, dtype=float, copy=True)
            shifted[k] += eps
            plus = self.transform.to_external(shifted)[i]
            shifted[k] -= 2.0 * eps
            minus = self.transform.to_external(shifted)[i]
            jac[k] = (plus - minus) / (2.0 * eps)
        return grad_ext[self.transform.free] * jac


class QuasiNewtonReminimizer:
    """
    Minimize over the free parameters of a state with BFGS or L-BFGS.

    Args:
        objective: Cost to minimize.
        strategy: Supplies the gradient tolerance, the iteration limit and the
            choice of inner method.
    """

    def __init__(self, objective: Objective, strategy: Optional[Strategy] = None) -> None:
        self.objective = objective
        self.strategy = strategy if strategy is not None else Strategy()

    def _start_vector(self, state: ParameterState, transform: ParameterTransform) -> np.ndarray:
        values = state.values
        for i in transform.free:
            param = state[i]
            nudge = _LIMIT_NUDGE * param.error
            if param.lower is not None and values[i] <= param.lower:
                values[i] = param.lower + nudge
            if param.upper is not None and values[i] >= param.upper:
                values[i] = param.upper - nudge
            values[i] = param.clip(values[i])
        return transform.to_internal(values)

    def reminimize(
        self, state: ParameterState, max_calls: Optional[int] = None
    ) -> Reminimization:
        """Minimize over the free parameters of ``state``.

        At most ``max_calls`` objective evaluations are spent; when the budget
        runs out the best point seen so far is returned with
        ``reached_call_limit`` set.
        """
        if max_calls is not None and max_calls < 1:
            raise ValueError(f"max_calls must be >= 1, got {max_calls}")
        transform = ParameterTransform(state)
        fun = _BudgetedFunction(self.objective, transform, max_calls)

        if transform.dim == 0:
            fval = fun(np.zeros(0))
            return Reminimization(
                state=state.copy(),
                fval=fval,
                is_valid=math.isfinite(fval),
                nfcn=fun.ncalls,
                message="No free parameters; objective evaluated once.",
            )

        problem = Problem(
            fun=fun,
            grad=fun.gradient if has_gradient(self.objective) else None,
            dim=transform.dim,
        )
        x0 = self._start_vector(state, transform)
        method = lbfgs if self.strategy.method == "lbfgs" else bfgs
        try:
            res = method(
                problem,
                x0,
                maxiter=self.strategy.reminimize_maxiter,
                tol=self.strategy.gradient_tolerance,
                maxfev=max_calls,
            )
        except _BudgetExhausted:
            best = fun.best_x if fun.best_x is not None else x0
            logger.debug("call budget of %d exhausted during minimization", max_calls)
            return Reminimization(
                state=state.with_values(transform.to_external(best)),
                fval=fun.best_f,
                is_valid=False,
                nfcn=fun.ncalls,
                reached_call_limit=True,
                message="Maximum function evaluations reached.",
            )

        is_valid = bool(res.success and math.isfinite(res.fun))
        if not is_valid:
            logger.debug("minimization did not converge: %s", res.message)
        return Reminimization(
            state=state.with_values(transform.to_external(res.x)),
            fval=float(res.fun),
            is_valid=is_valid,
            nfcn=fun.ncalls,
            reached_call_limit=res.reached_maxfev,
            message=res.message,
        )

    def minimize(self, state: ParameterState, max_calls: Optional[int] = None) -> Reminimization:
        """Find the minimum over all free parameters of ``state``."""
        if max_calls is None:
            max_calls = self.strategy.call_budget(state.n_free)
        return self.reminimize(state, max_calls=max_calls)


__all__ = ["Reminimization", "Reminimizer", "QuasiNewtonReminimizer"]
