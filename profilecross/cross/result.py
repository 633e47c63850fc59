"""Request and result types of the crossing search."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from ..parameters import ParameterState
from .history import TrialPoint


class CrossStatus(Enum):
    """Terminal state of a crossing search."""

    CONVERGED = "converged"
    AT_LIMIT = "at_limit"
    NEW_MINIMUM = "new_minimum"
    CALL_LIMIT = "call_limit"
    INVALID = "invalid"


@dataclass(frozen=True)
class CrossingRequest:
    """
    What to search for.

    Trial values move the parameters in ``indices`` along
    ``direction * step_guess`` from their current values; the search stops
    where the profile cost reaches ``fmin + target_delta``.
    """

    indices: tuple[int, ...]
    directions: tuple[float, ...]
    step_guesses: tuple[float, ...]
    target_delta: float
    max_calls: int

    def __post_init__(self) -> None:
        if len(self.indices) == 0:
            raise ValueError("indices must not be empty")
        if len(set(self.indices)) != len(self.indices):
            raise ValueError(f"indices must be unique, got {self.indices}")
        if not (len(self.indices) == len(self.directions) == len(self.step_guesses)):
            raise ValueError(
                "indices, directions and step_guesses must have the same length, got "
                f"{len(self.indices)}, {len(self.directions)}, {len(self.step_guesses)}"
            )
        if any(d == 0 or not np.isfinite(d) for d in self.directions):
            raise ValueError(f"directions must be finite and non-zero, got {self.directions}")
        if any(not (s > 0 and np.isfinite(s)) for s in self.step_guesses):
            raise ValueError(f"step_guesses must be positive, got {self.step_guesses}")
        if not (self.target_delta > 0 and np.isfinite(self.target_delta)):
            raise ValueError(f"target_delta must be > 0, got {self.target_delta}")
        if self.max_calls < 1:
            raise ValueError(f"max_calls must be >= 1, got {self.max_calls}")

    @classmethod
    def build(
        cls,
        indices: Sequence[int],
        directions: Sequence[float],
        step_guesses: Sequence[float],
        target_delta: float,
        max_calls: int,
    ) -> "CrossingRequest":
        return cls(
            indices=tuple(int(i) for i in indices),
            directions=tuple(float(d) for d in directions),
            step_guesses=tuple(float(s) for s in step_guesses),
            target_delta=float(target_delta),
            max_calls=int(max_calls),
        )

    @property
    def offsets(self) -> np.ndarray:
        """Parameter displacement per unit step along the search line."""
        return np.asarray(self.directions, dtype=float) * np.asarray(
            self.step_guesses, dtype=float
        )


@dataclass(frozen=True)
class CrossingResult:
    """
    Outcome of one crossing search.

    Attributes:
        status: Terminal state; exactly one of the boolean properties below
            is true.
        values: Values of the searched parameters at the crossing, or at the
            best trial when the search did not converge.
        step: Position of ``values`` along the search line.
        fval: Profile cost at ``values`` (NaN when nothing was evaluated).
        nfcn: Objective calls consumed.
        niter: Trial points evaluated.
        state: Re-minimized state at ``values``, if any.
        message: Human-readable explanation of ``status``.
        trace: Every trial point, in order, when tracing was requested.
    """

    status: CrossStatus
    values: np.ndarray
    step: float
    fval: float
    nfcn: int
    niter: int
    state: Optional[ParameterState] = None
    message: str = ""
    trace: Optional[tuple[TrialPoint, ...]] = None

    @property
    def converged(self) -> bool:
        return self.status is CrossStatus.CONVERGED

    @property
    def at_limit(self) -> bool:
        return self.status is CrossStatus.AT_LIMIT

    @property
    def new_minimum_found(self) -> bool:
        return self.status is CrossStatus.NEW_MINIMUM

    @property
    def max_calls_exceeded(self) -> bool:
        return self.status is CrossStatus.CALL_LIMIT

    @property
    def invalid_reminimization(self) -> bool:
        return self.status is CrossStatus.INVALID

    @property
    def is_valid(self) -> bool:
        return self.converged

    @property
    def value(self) -> float:
        """Crossing value of the first searched parameter."""
        return float(self.values[0])


__all__ = ["CrossStatus", "CrossingRequest", "CrossingResult"]
