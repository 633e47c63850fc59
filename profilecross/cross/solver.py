"""
Search for the point where the profile cost crosses ``fmin + delta``.

The profile cost at a trial value of the searched parameter(s) is the
objective re-minimized over every other free parameter. Starting one step
guess away from the minimum, :class:`FunctionCrossSolver` alternates between
re-minimizing at a trial value and extrapolating the next trial value from
the three most recent ones, until the profile cost is within tolerance of
the target level or the search has to give up. Giving up is reported in the
result status, never raised:

- ``AT_LIMIT``: the target lies beyond a declared parameter limit,
- ``NEW_MINIMUM``: a trial went below the supplied minimum,
- ``CALL_LIMIT``: the call or iteration budget ran out,
- ``INVALID``: the inner minimizer kept failing.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Union

import numpy as np

from ..diagnostics import assert_finite, assert_good_standing, is_debug_enabled
from ..logging import get_logger
from ..minimize import QuasiNewtonReminimizer, Reminimization, Reminimizer
from ..objective import Objective
from ..parameters import ParameterState
from ..strategy import Strategy
from .extrapolator import ParabolicExtrapolator
from .history import TrialHistory, TrialPoint
from .result import CrossingRequest, CrossingResult, CrossStatus

logger = get_logger(__name__)

Key = Union[int, str]


class FunctionCrossSolver:
    """
    Crossing search around a known minimum.

    Args:
        objective: Cost function; its ``up`` is the default target delta.
        state: Parameter state at the minimum. It is never modified.
        fmin: Cost at the minimum.
        strategy: Tolerances and budgets.
        reminimizer: Minimizer for the remaining free parameters. Defaults to
            a :class:`~profilecross.minimize.QuasiNewtonReminimizer` on
            ``objective``.

    Example:
        >>> from profilecross import FunctionCrossSolver, FunctionObjective, ParameterState
        >>> state = ParameterState()
        >>> _ = state.add("x", 2.0, 1.0)
        >>> objective = FunctionObjective(lambda p: (p[0] - 2.0) ** 2, up=1.0)
        >>> result = FunctionCrossSolver(objective, state, fmin=0.0).solve([0], [1.0], [1.0])
        >>> result.converged, round(result.value, 6)
        (True, 3.0)
    """

    def __init__(
        self,
        objective: Objective,
        state: ParameterState,
        fmin: float,
        strategy: Optional[Strategy] = None,
        reminimizer: Optional[Reminimizer] = None,
    ) -> None:
        assert_finite(fmin, "fmin")
        self.objective = objective
        self.state = state
        self.fmin = float(fmin)
        self.strategy = strategy if strategy is not None else Strategy()
        self.reminimizer = (
            reminimizer
            if reminimizer is not None
            else QuasiNewtonReminimizer(objective, self.strategy)
        )

    def solve(
        self,
        indices: Sequence[Key],
        directions: Sequence[float],
        step_guesses: Sequence[float],
        target_delta: Optional[float] = None,
        max_calls: Optional[int] = None,
        trace: bool = False,
    ) -> CrossingResult:
        """Find the crossing along ``direction * step_guess`` per parameter.

        ``target_delta`` defaults to the objective's ``up`` and ``max_calls``
        to the strategy's call budget.
        """
        if target_delta is None:
            target_delta = self.objective.up
        if max_calls is None:
            max_calls = self.strategy.call_budget(self.state.n_free)
        request = CrossingRequest.build(
            indices=[self.state.index(key) for key in indices],
            directions=directions,
            step_guesses=step_guesses,
            target_delta=target_delta,
            max_calls=max_calls,
        )
        return self.solve_request(request, trace=trace)

    def solve_request(self, request: CrossingRequest, trace: bool = False) -> CrossingResult:
        """Run the search described by ``request``."""
        assert_good_standing(self.state, request.indices)
        search = _Search(self, request, trace or is_debug_enabled())
        return search.run()

    def step_limit(self, request: CrossingRequest) -> float:
        """Largest step along the search line that stays inside all limits."""
        limit = math.inf
        for index, offset in zip(request.indices, request.offsets):
            param = self.state[index]
            if offset > 0 and param.upper is not None:
                limit = min(limit, (param.upper - param.value) / offset)
            elif offset < 0 and param.lower is not None:
                limit = min(limit, (param.lower - param.value) / offset)
        return limit


class _Search:
    """Per-call state of one crossing search."""

    def __init__(
        self, solver: FunctionCrossSolver, request: CrossingRequest, keep_trace: bool
    ) -> None:
        self.solver = solver
        self.request = request
        self.strategy = solver.strategy
        self.indices = list(request.indices)
        self.origin = solver.state.values[self.indices]
        self.offsets = request.offsets
        self.fmin = solver.fmin
        self.aim = solver.fmin + request.target_delta
        self.tol = self.strategy.tolerance * request.target_delta
        self.noise = self.strategy.noise_tolerance * max(1.0, abs(solver.fmin))
        self.step_limit = solver.step_limit(request)
        self.history = TrialHistory()
        self.extrapolator = ParabolicExtrapolator(
            fmin=solver.fmin,
            target_delta=request.target_delta,
            step_cap_factor=self.strategy.step_cap_factor,
            curvature_floor=self.strategy.curvature_floor,
            curvature=self.curvature(solver, request),
        )
        self.trace: Optional[list[TrialPoint]] = [] if keep_trace else None
        self.working = solver.state
        self.nfcn = 0
        self.niter = 0
        self.failures = 0
        self.best: Optional[tuple[TrialPoint, ParameterState]] = None

    @staticmethod
    def curvature(solver: FunctionCrossSolver, request: CrossingRequest) -> float:
        """Rise per unit step squared predicted by the parabolic errors."""
        rise = sum(
            (offset / solver.state[index].error) ** 2
            for index, offset in zip(request.indices, request.offsets)
        )
        return solver.objective.up * rise

    def values_at(self, step: float) -> np.ndarray:
        values = self.origin + step * self.offsets
        state = self.solver.state
        return np.array(
            [state[i].clip(v) for i, v in zip(self.indices, values)], dtype=float
        )

    def released(self, state: ParameterState) -> ParameterState:
        clone = state.copy()
        for index in self.indices:
            if not self.solver.state[index].fixed:
                clone.release(index)
        return clone

    def finish(
        self,
        status: CrossStatus,
        message: str,
        point: Optional[TrialPoint] = None,
        state: Optional[ParameterState] = None,
    ) -> CrossingResult:
        if point is None and self.best is not None:
            point, state = self.best
        if point is None:
            values, step, fval = self.origin.copy(), 0.0, math.nan
        else:
            values, step, fval = point.values.copy(), point.step, point.fval
        log = (
            logger.info
            if status in (CrossStatus.CONVERGED, CrossStatus.AT_LIMIT)
            else logger.warning
        )
        log(
            "crossing for parameters %s: %s after %d trials, %d calls (%s)",
            self.indices,
            status.value,
            self.niter,
            self.nfcn,
            message,
        )
        return CrossingResult(
            status=status,
            values=values,
            step=step,
            fval=fval,
            nfcn=self.nfcn,
            niter=self.niter,
            state=None if state is None else self.released(state),
            message=message,
            trace=None if self.trace is None else tuple(self.trace),
        )

    def evaluate(self, step: float, clamped: bool) -> tuple[TrialPoint, Reminimization]:
        values = self.values_at(step)
        trial_state = self.working.with_fixed(self.indices, values)
        remaining = self.request.max_calls - self.nfcn
        rem = self.solver.reminimizer.reminimize(trial_state, max_calls=remaining)
        self.nfcn += rem.nfcn
        self.niter += 1
        point = TrialPoint(
            step=step,
            values=values,
            fval=float(rem.fval),
            is_valid=rem.is_valid,
            nfcn=rem.nfcn,
            at_limit=clamped,
        )
        if self.trace is not None:
            self.trace.append(point)
        logger.debug(
            "trial %d: step=%.6g values=%s f=%.10g (aim %.10g) valid=%s calls=%d",
            self.niter,
            step,
            values,
            point.fval,
            self.aim,
            point.is_valid,
            rem.nfcn,
        )
        return point, rem

    def remember(self, point: TrialPoint, state: ParameterState) -> None:
        if self.best is None or abs(point.fval - self.aim) < abs(self.best[0].fval - self.aim):
            self.best = (point, state)

    def run(self) -> CrossingResult:
        if self.step_limit <= 0:
            return self.finish(
                CrossStatus.AT_LIMIT,
                "parameter already at its limit in the search direction",
                point=TrialPoint(0.0, self.origin.copy(), self.fmin, True, 0, True),
                state=self.solver.state,
            )

        step = 1.0
        while True:
            if self.niter >= self.strategy.max_iterations:
                return self.finish(CrossStatus.CALL_LIMIT, "iteration limit reached")
            if self.nfcn >= self.request.max_calls:
                return self.finish(CrossStatus.CALL_LIMIT, "call budget exhausted")

            clamped = step >= self.step_limit
            if clamped:
                step = self.step_limit
            point, rem = self.evaluate(step, clamped)

            if math.isfinite(point.fval) and point.fval < self.fmin - self.noise:
                logger.warning(
                    "new minimum %.10g below %.10g found at %s",
                    point.fval,
                    self.fmin,
                    point.values,
                )
                return self.finish(
                    CrossStatus.NEW_MINIMUM,
                    "re-minimization found a lower minimum",
                    point=point,
                    state=rem.state,
                )

            if rem.reached_call_limit:
                return self.finish(CrossStatus.CALL_LIMIT, "call budget exhausted")

            if not point.is_valid:
                self.failures += 1
                logger.warning(
                    "re-minimization failed at step %.6g (%s)", step, rem.message
                )
                if clamped:
                    return self.finish(
                        CrossStatus.INVALID,
                        "re-minimization failed at the parameter limit",
                    )
                if self.failures > self.strategy.max_failures:
                    return self.finish(
                        CrossStatus.INVALID,
                        f"re-minimization failed {self.failures} times",
                    )
                last_good = self.history.last.step if self.history.last is not None else 0.0
                step = 0.5 * (step + last_good)
                continue

            self.remember(point, rem.state)
            if abs(point.fval - self.aim) <= self.tol:
                return self.finish(
                    CrossStatus.CONVERGED, "crossing found", point=point, state=rem.state
                )
            if clamped and point.fval < self.aim:
                return self.finish(
                    CrossStatus.AT_LIMIT,
                    "target level not reached at the parameter limit",
                    point=point,
                    state=rem.state,
                )

            self.history.append(point)
            self.working = rem.state
            step = self.extrapolator.next(self.history, self.aim)


__all__ = ["FunctionCrossSolver"]
