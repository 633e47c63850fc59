"""
Next-trial proposals for the crossing search.

Positions are scalar steps ``a`` along the search line, with the minimum at
``a = 0`` and the initial trial at ``a = 1``. Given up to three recent
``(a, f)`` pairs the extrapolator proposes where the profile cost reaches
the target level:

- one point: a parabola with its vertex at the minimum through the point,
- two points: the secant,
- three points: the interpolating parabola.

Every proposal is then kept inside the tightest bracket of the target (the
minimum itself counts as a point below it) and capped to
``step_cap_factor`` times the previous step.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence, Union

import numpy as np

from .history import TrialHistory, TrialPoint

PointLike = Union[TrialPoint, tuple[float, float]]

# fraction of a bracket kept clear of its ends
_BRACKET_MARGIN = 0.05


def _as_arrays(history: Union[TrialHistory, Iterable[PointLike]]) -> tuple[np.ndarray, np.ndarray]:
    if isinstance(history, TrialHistory):
        return history.steps, history.fvals
    steps, fvals = [], []
    for point in history:
        if isinstance(point, TrialPoint):
            steps.append(point.step)
            fvals.append(point.fval)
        else:
            a, f = point
            steps.append(float(a))
            fvals.append(float(f))
    return np.asarray(steps, dtype=float), np.asarray(fvals, dtype=float)


class ParabolicExtrapolator:
    """
    Propose the next step of a crossing search.

    Args:
        fmin: Cost at the minimum (``a = 0``).
        target_delta: Rise above ``fmin`` that defines the crossing.
        step_cap_factor: Bound on the growth of consecutive steps.
        curvature_floor: Smallest rise, as a fraction of ``target_delta``,
            credited to a single trial point.
        curvature: Cost rise per unit step squared assumed when a single
            trial shows no rise at all. Defaults to ``target_delta``, i.e.
            the step guess is taken to be the parabolic error.
    """

    def __init__(
        self,
        fmin: float,
        target_delta: float,
        step_cap_factor: float = 2.0,
        curvature_floor: float = 0.1,
        curvature: Optional[float] = None,
    ) -> None:
        if not target_delta > 0:
            raise ValueError(f"target_delta must be > 0, got {target_delta}")
        if not step_cap_factor > 1.0:
            raise ValueError(f"step_cap_factor must be > 1, got {step_cap_factor}")
        if curvature is not None and not curvature > 0:
            raise ValueError(f"curvature must be > 0, got {curvature}")
        self.fmin = float(fmin)
        self.target_delta = float(target_delta)
        self.step_cap_factor = float(step_cap_factor)
        self.curvature_floor = float(curvature_floor)
        self.curvature = float(curvature) if curvature is not None else self.target_delta

    @property
    def target(self) -> float:
        return self.fmin + self.target_delta

    def next(
        self,
        history: Union[TrialHistory, Sequence[PointLike]],
        target: Optional[float] = None,
    ) -> float:
        """Return the next step given the recent trial history."""
        if target is None:
            target = self.target
        steps, fvals = _as_arrays(history)
        if steps.size == 0:
            return 1.0
        steps, fvals = steps[-3:], fvals[-3:]

        a_last = float(steps[-1])
        a_prev = float(steps[-2]) if steps.size >= 2 else 0.0
        base = abs(a_last - a_prev) or abs(a_last) or 1.0

        if steps.size == 1:
            proposal = self._from_one(a_last, float(fvals[-1]), target)
        elif steps.size == 2:
            proposal = self._from_secant(steps, fvals, target, base)
        else:
            proposal = self._from_parabola(steps, fvals, target, base)

        if not math.isfinite(proposal):
            proposal = a_last + 2.0 * base
        proposal = self._keep_in_bracket(proposal, steps, fvals, target, base)
        return self._cap(proposal, a_last, base)

    def _from_one(self, a1: float, f1: float, target: float) -> float:
        rise = f1 - self.fmin
        if rise > 0:
            coeff = max(rise, self.curvature_floor * self.target_delta) / (a1 * a1)
        else:
            coeff = self.curvature
        return math.sqrt((target - self.fmin) / coeff)

    def _from_secant(
        self, steps: np.ndarray, fvals: np.ndarray, target: float, base: float
    ) -> float:
        a1, a2 = float(steps[-2]), float(steps[-1])
        f1, f2 = float(fvals[-2]), float(fvals[-1])
        rise = (f2 - f1) * math.copysign(1.0, a2 - a1) if a2 != a1 else 0.0
        if rise <= 1e-12 * max(1.0, abs(f2)):
            # flat or falling outward: keep walking out
            return a2 + 2.0 * base
        return a2 + (target - f2) * (a2 - a1) / (f2 - f1)

    def _from_parabola(
        self, steps: np.ndarray, fvals: np.ndarray, target: float, base: float
    ) -> float:
        try:
            coeffs = np.linalg.solve(np.vander(steps, 3), fvals)
        except np.linalg.LinAlgError:
            return self._from_secant(steps, fvals, target, base)
        a2, b1, c0 = (float(c) for c in coeffs)
        scale = max(1.0, float(np.max(np.abs(fvals))))
        if abs(a2) <= 1e-12 * scale:
            return self._from_secant(steps, fvals, target, base)

        a_last = float(steps[-1])
        disc = b1 * b1 - 4.0 * a2 * (c0 - target)
        if disc >= 0.0:
            root = math.sqrt(disc)
            roots = [(-b1 + root) / (2.0 * a2), (-b1 - root) / (2.0 * a2)]
            rising = [r for r in roots if r > 0 and 2.0 * a2 * r + b1 > 0]
            if rising:
                return min(rising, key=lambda r: abs(r - a_last))

        # no usable root: follow the fitted slope from the point nearest the target
        k = int(np.argmin(np.abs(fvals - target)))
        a_k, f_k = float(steps[k]), float(fvals[k])
        slope = 2.0 * a2 * a_k + b1
        if slope > 1e-12 * scale:
            return a_k + (target - f_k) / slope
        vertex = -b1 / (2.0 * a2)
        toward = math.copysign(1.0, vertex - a_last)
        sign = toward if fvals[-1] > target else -toward
        return a_last + sign * 2.0 * base

    def _keep_in_bracket(
        self,
        proposal: float,
        steps: np.ndarray,
        fvals: np.ndarray,
        target: float,
        base: float,
    ) -> float:
        below = [(0.0, self.fmin)] + [
            (float(a), float(f)) for a, f in zip(steps, fvals) if f < target
        ]
        above = [(float(a), float(f)) for a, f in zip(steps, fvals) if f >= target]
        if not above:
            furthest = max(a for a, _ in below)
            if proposal <= furthest:
                return furthest + 2.0 * base
            return proposal

        lo, hi = min(
            ((b, u) for b in below for u in above),
            key=lambda pair: abs(pair[0][0] - pair[1][0]),
        )
        left, right = sorted((lo[0], hi[0]))
        width = right - left
        if width <= 0:
            return proposal
        if not left < proposal < right:
            # regula falsi between the bracketing points
            proposal = lo[0] + (target - lo[1]) * (hi[0] - lo[0]) / (hi[1] - lo[1])
        margin = _BRACKET_MARGIN * width
        return min(max(proposal, left + margin), right - margin)

    def _cap(self, proposal: float, a_last: float, base: float) -> float:
        limit = self.step_cap_factor * base
        return a_last + max(-limit, min(limit, proposal - a_last))


__all__ = ["ParabolicExtrapolator"]
