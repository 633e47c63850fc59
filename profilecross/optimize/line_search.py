"""
Step-length selection along a descent direction.

Both searches take the objective value (and, for the Wolfe search, the
gradient) already known at the start point, so a step only costs the trial
evaluations it makes. Each returns ``(alpha, nfev)`` where ``nfev`` counts
calls of ``f``; gradient calls are not included.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .utils import Array, Gradient, ObjectiveFn

# fraction of a bracket an interpolated trial must stay away from its ends
_SAFEGUARD = 0.1


def backtracking_armijo(
    f: ObjectiveFn,
    x: Array,
    p: Array,
    grad_fx: Array,
    fx: Optional[float] = None,
    alpha0: float = 1.0,
    rho: float = 0.5,
    c: float = 1e-4,
    max_iter: int = 50,
) -> tuple[float, int]:
    """Shrink ``alpha`` by ``rho`` until the sufficient-decrease test passes.

    A non-finite trial value fails the test.
    """
    if not (0 < c < 1):
        raise ValueError("Armijo constant c must lie in (0, 1)")
    if not (0 < rho < 1):
        raise ValueError("rho must lie in (0, 1)")
    nfev = 0
    if fx is None:
        fx = float(f(x))
        nfev += 1
    slope = float(np.dot(grad_fx, p))
    alpha = float(alpha0)
    for _ in range(max_iter):
        trial = f(x + alpha * p)
        nfev += 1
        if np.isfinite(trial) and trial <= fx + c * alpha * slope:
            break
        alpha *= rho
    return alpha, nfev


def _interpolate(lo: float, f_lo: float, d_lo: float, hi: float, f_hi: float) -> float:
    """Minimizer of the quadratic matching f and f' at ``lo`` and f at ``hi``.

    Falls back to bisection when the quadratic has no interior minimum, and
    keeps the result away from the bracket ends.
    """
    width = hi - lo
    left, right = min(lo, hi), max(lo, hi)
    margin = _SAFEGUARD * abs(width)
    curvature = f_hi - f_lo - d_lo * width
    if not (np.isfinite(f_hi) and np.isfinite(d_lo)) or curvature <= 0:
        return 0.5 * (lo + hi)
    alpha = lo - d_lo * width * width / (2.0 * curvature)
    return min(max(alpha, left + margin), right - margin)


def wolfe_line_search(
    f: ObjectiveFn,
    grad: Gradient,
    x: Array,
    p: Array,
    fx: Optional[float] = None,
    gx: Optional[Array] = None,
    alpha0: float = 1.0,
    c1: float = 1e-4,
    c2: float = 0.9,
    max_iter: int = 40,
    max_zoom: int = 32,
) -> tuple[float, int]:
    """Find a step satisfying the strong Wolfe conditions.

    The step is doubled until the minimum along ``p`` is bracketed, then the
    bracket is narrowed by safeguarded quadratic interpolation (Nocedal &
    Wright, algorithms 3.5 and 3.6).
    """
    if not (0 < c1 < c2 < 1):
        raise ValueError("Require 0 < c1 < c2 < 1 for Wolfe conditions.")

    nfev = 0

    def phi(alpha: float) -> float:
        nonlocal nfev
        nfev += 1
        return float(f(x + alpha * p))

    def slope_at(alpha: float) -> float:
        return float(np.dot(grad(x + alpha * p), p))

    f0 = phi(0.0) if fx is None else float(fx)
    d0 = float(np.dot(gx, p)) if gx is not None else slope_at(0.0)
    if d0 >= 0:
        raise ValueError("Search direction must be a descent direction.")

    def decreases(alpha: float, value: float) -> bool:
        return bool(np.isfinite(value)) and value <= f0 + c1 * alpha * d0

    def flat_enough(slope: float) -> bool:
        return abs(slope) <= -c2 * d0

    def zoom(lo: float, f_lo: float, d_lo: float, hi: float, f_hi: float) -> float:
        alpha = lo
        last_width = np.inf
        for _ in range(max_zoom):
            width = abs(hi - lo)
            if width > 0.5 * last_width:
                # interpolation stalled: bisect
                alpha = 0.5 * (lo + hi)
            else:
                alpha = _interpolate(lo, f_lo, d_lo, hi, f_hi)
            last_width = width
            value = phi(alpha)
            if not decreases(alpha, value) or value >= f_lo:
                hi, f_hi = alpha, value
            else:
                slope = slope_at(alpha)
                if flat_enough(slope):
                    return alpha
                if slope * (hi - lo) >= 0:
                    hi, f_hi = lo, f_lo
                lo, f_lo, d_lo = alpha, value, slope
            if abs(hi - lo) < 1e-12:
                break
        return alpha

    lo, f_lo, d_lo = 0.0, f0, d0
    alpha = float(alpha0)
    for _ in range(max_iter):
        value = phi(alpha)
        if not decreases(alpha, value) or value >= f_lo:
            return zoom(lo, f_lo, d_lo, alpha, value), nfev
        slope = slope_at(alpha)
        if flat_enough(slope):
            return alpha, nfev
        if slope >= 0:
            return zoom(alpha, value, slope, lo, f_lo), nfev
        lo, f_lo, d_lo = alpha, value, slope
        alpha *= 2.0
    return alpha, nfev


__all__ = ["backtracking_armijo", "wolfe_line_search"]
