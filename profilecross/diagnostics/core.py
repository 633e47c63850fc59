"""Consistency checks on parameter states and objective values."""

from __future__ import annotations

import math
from typing import Iterable

from ..parameters import ParameterState


def is_finite(value: float) -> bool:
    """Return True if ``value`` is a finite real number."""
    return math.isfinite(float(value))


def assert_finite(value: float, name: str = "value") -> None:
    """Raise ValueError if ``value`` is NaN or infinite."""
    if not is_finite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")


def in_good_standing(state: ParameterState, index: int) -> bool:
    """
    Return True if parameter ``index`` is free and inside its limits.

    Only such parameters can be moved along a crossing search.
    """
    param = state[index]
    return (not param.fixed) and param.within_limits(param.value)


def assert_good_standing(state: ParameterState, indices: Iterable[int]) -> None:
    """
    Raise ValueError unless every parameter in ``indices`` is in good standing.
    """
    for index in indices:
        param = state[index]
        if param.fixed:
            raise ValueError(f"Parameter {param.name!r} is fixed.")
        if not param.within_limits(param.value):
            raise ValueError(
                f"Parameter {param.name!r} value {param.value} lies outside "
                f"its limits [{param.lower}, {param.upper}]."
            )


__all__ = ["is_finite", "assert_finite", "in_good_standing", "assert_good_standing"]
