"""
Asymmetric (MINOS) errors built on the crossing search.

For each parameter two independent crossings are searched, one above and
one below the minimum, starting one parabolic error away. The distances from
the minimum to the two crossings are the upper and lower errors.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .cross import CrossingResult, CrossStatus, FunctionCrossSolver
from .logging import get_logger
from .minimize import Reminimizer
from .objective import Objective
from .parameters import ParameterState
from .strategy import Strategy

logger = get_logger(__name__)

Key = Union[int, str]


@dataclass(frozen=True)
class MinosError:
    """Lower and upper error of one parameter.

    ``lower`` is negative (or zero) and ``upper`` positive (or zero); a side
    whose search was skipped is NaN.
    """

    index: int
    name: str
    value: float
    lower: float
    upper: float
    lower_result: Optional[CrossingResult]
    upper_result: Optional[CrossingResult]

    @property
    def lower_valid(self) -> bool:
        return self.lower_result is not None and self.lower_result.converged

    @property
    def upper_valid(self) -> bool:
        return self.upper_result is not None and self.upper_result.converged

    @property
    def is_valid(self) -> bool:
        return self.lower_valid and self.upper_valid

    @property
    def at_lower_limit(self) -> bool:
        return self.lower_result is not None and self.lower_result.at_limit

    @property
    def at_upper_limit(self) -> bool:
        return self.upper_result is not None and self.upper_result.at_limit

    @property
    def lower_new_minimum(self) -> bool:
        return self.lower_result is not None and self.lower_result.new_minimum_found

    @property
    def upper_new_minimum(self) -> bool:
        return self.upper_result is not None and self.upper_result.new_minimum_found

    @property
    def new_minimum_found(self) -> bool:
        return self.lower_new_minimum or self.upper_new_minimum

    @property
    def nfcn(self) -> int:
        return sum(r.nfcn for r in (self.lower_result, self.upper_result) if r is not None)


class Minos:
    """
    Compute MINOS errors around a minimum.

    Args:
        objective: Cost function; ``objective.up`` defines one error unit.
        state: Parameter state at the minimum, with parabolic errors.
        fmin: Cost at the minimum.
        strategy: Tolerances and budgets of the crossing searches.
        reminimizer: Minimizer for the other free parameters.
        target_delta: Overrides ``objective.up`` (e.g. ``4 * up`` for two
            standard deviations).
    """

    def __init__(
        self,
        objective: Objective,
        state: ParameterState,
        fmin: float,
        strategy: Optional[Strategy] = None,
        reminimizer: Optional[Reminimizer] = None,
        target_delta: Optional[float] = None,
    ) -> None:
        self.solver = FunctionCrossSolver(objective, state, fmin, strategy, reminimizer)
        self.state = state
        self.target_delta = (
            float(target_delta) if target_delta is not None else float(objective.up)
        )
        if not self.target_delta > 0:
            raise ValueError(f"target_delta must be > 0, got {self.target_delta}")

    def _step_guess(self, index: int, direction: int) -> float:
        param = self.state[index]
        error = param.error * math.sqrt(self.target_delta / self.solver.objective.up)
        guess = param.value + direction * error
        if direction > 0 and param.upper is not None:
            guess = min(guess, param.upper)
        if direction < 0 and param.lower is not None:
            guess = max(guess, param.lower)
        return abs(guess - param.value) or error

    def _cross(self, key: Key, direction: int, max_calls: Optional[int]) -> CrossingResult:
        index = self.state.index(key)
        return self.solver.solve(
            [index],
            [float(direction)],
            [self._step_guess(index, direction)],
            target_delta=self.target_delta,
            max_calls=max_calls,
        )

    def upper(self, key: Key, max_calls: Optional[int] = None) -> CrossingResult:
        """Crossing above the minimum for parameter ``key``."""
        return self._cross(key, +1, max_calls)

    def lower(self, key: Key, max_calls: Optional[int] = None) -> CrossingResult:
        """Crossing below the minimum for parameter ``key``."""
        return self._cross(key, -1, max_calls)

    def minos_error(self, key: Key, max_calls: Optional[int] = None) -> MinosError:
        """Both crossings of parameter ``key``.

        The lower search is skipped when the upper one found a new minimum,
        since the errors must then be recomputed around that minimum.
        """
        index = self.state.index(key)
        param = self.state[index]
        upper_result = self.upper(index, max_calls)
        lower_result: Optional[CrossingResult] = None
        if upper_result.status is CrossStatus.NEW_MINIMUM:
            logger.warning(
                "skipping lower error of %r: new minimum found above it", param.name
            )
        else:
            lower_result = self.lower(index, max_calls)

        def distance(result: Optional[CrossingResult]) -> float:
            if result is None:
                return math.nan
            return float(result.value - param.value)

        return MinosError(
            index=index,
            name=param.name,
            value=param.value,
            lower=distance(lower_result),
            upper=distance(upper_result),
            lower_result=lower_result,
            upper_result=upper_result,
        )

    __call__ = minos_error


def minos_errors(
    objective: Objective,
    state: ParameterState,
    fmin: float,
    parameters: Optional[Iterable[Key]] = None,
    strategy: Optional[Strategy] = None,
    reminimizer: Optional[Reminimizer] = None,
    target_delta: Optional[float] = None,
) -> dict[str, MinosError]:
    """MINOS errors of the given (default: all free) parameters, keyed by name."""
    minos = Minos(objective, state, fmin, strategy, reminimizer, target_delta)
    keys = list(parameters) if parameters is not None else state.free_indices
    errors: dict[str, MinosError] = {}
    for key in keys:
        error = minos.minos_error(key)
        errors[error.name] = error
    return errors


__all__ = ["MinosError", "Minos", "minos_errors"]
