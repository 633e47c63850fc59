"""Trial points and the sliding window the extrapolator works on."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, Optional

import numpy as np

HISTORY_SIZE = 3


@dataclass(frozen=True)
class TrialPoint:
    """One evaluated point of the crossing search.

    ``step`` is the position along the search line: the trial parameter
    values are ``origin + step * direction * step_guess``.
    """

    step: float
    values: np.ndarray
    fval: float
    is_valid: bool
    nfcn: int
    at_limit: bool = False


class TrialHistory:
    """The most recent valid trial points, oldest dropped first."""

    def __init__(self, capacity: int = HISTORY_SIZE) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._points: Deque[TrialPoint] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._points.maxlen

    def append(self, point: TrialPoint) -> None:
        self._points.append(point)

    def clear(self) -> None:
        self._points.clear()

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[TrialPoint]:
        return iter(self._points)

    @property
    def last(self) -> Optional[TrialPoint]:
        return self._points[-1] if self._points else None

    @property
    def steps(self) -> np.ndarray:
        return np.array([p.step for p in self._points], dtype=float)

    @property
    def fvals(self) -> np.ndarray:
        return np.array([p.fval for p in self._points], dtype=float)


__all__ = ["HISTORY_SIZE", "TrialPoint", "TrialHistory"]
