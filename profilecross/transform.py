"""
Internal coordinates for bounded parameters.

Minimizers in :mod:`profilecross.optimize` are unconstrained. Free parameters
with limits are therefore minimized in an internal coordinate that maps the
whole real line onto the allowed interval:

- both limits:   ``ext = lo + (hi - lo) / 2 * (sin(int) + 1)``
- lower only:    ``ext = lo - 1 + sqrt(int**2 + 1)``
- upper only:    ``ext = hi + 1 - sqrt(int**2 + 1)``

Unlimited parameters use the identity.
"""

from __future__ import annotations

import math

import numpy as np

from .parameters import Parameter, ParameterState


def to_internal(param: Parameter, value: float) -> float:
    """Map an external value of ``param`` to its internal coordinate."""
    value = param.clip(value)
    lo, hi = param.lower, param.upper
    if lo is not None and hi is not None:
        arg = 2.0 * (value - lo) / (hi - lo) - 1.0
        return math.asin(min(1.0, max(-1.0, arg)))
    if lo is not None:
        shifted = value - lo + 1.0
        return math.sqrt(max(shifted * shifted - 1.0, 0.0))
    if hi is not None:
        shifted = hi - value + 1.0
        return math.sqrt(max(shifted * shifted - 1.0, 0.0))
    return float(value)


def to_external(param: Parameter, internal: float) -> float:
    """Map an internal coordinate of ``param`` back to its external value."""
    lo, hi = param.lower, param.upper
    if lo is not None and hi is not None:
        return lo + 0.5 * (hi - lo) * (math.sin(internal) + 1.0)
    if lo is not None:
        return lo - 1.0 + math.sqrt(internal * internal + 1.0)
    if hi is not None:
        return hi + 1.0 - math.sqrt(internal * internal + 1.0)
    return float(internal)


class ParameterTransform:
    """
    Map between the free-parameter internal vector and full external vectors.

    Fixed parameters keep the value they hold in the state the transform was
    built from.
    """

    def __init__(self, state: ParameterState) -> None:
        self.state = state
        self.free = state.free_indices
        self._params = [state[i] for i in self.free]
        self._template = state.values

    @property
    def dim(self) -> int:
        return len(self.free)

    def to_internal(self, external: np.ndarray | None = None) -> np.ndarray:
        """Internal vector of the free parameters (defaults to the state values)."""
        if external is None:
            external = self._template
        external = np.asarray(external, dtype=float)
        return np.array(
            [to_internal(p, external[i]) for p, i in zip(self._params, self.free)],
            dtype=float,
        )

    def to_external(self, internal: np.ndarray) -> np.ndarray:
        """Full external parameter vector for the given internal vector."""
        full = self._template.copy()
        for k, (param, i) in enumerate(zip(self._params, self.free)):
            full[i] = to_external(param, float(internal[k]))
        return full


__all__ = ["ParameterTransform", "to_internal", "to_external"]
