"""
Parameter containers shared by the minimizers and the crossing search.

A :class:`ParameterState` is an ordered, name-addressable list of
:class:`Parameter` records. Each record carries a value, an error (used as
step size and as the parabolic error estimate), optional limits and a
fixed/free flag. Limits use ``None`` for an open side.

The state is mutable so that a fit can be set up incrementally, but every
algorithm in this package works on copies: :meth:`ParameterState.copy`,
:meth:`ParameterState.with_values` and :meth:`ParameterState.with_fixed`
never touch the original.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, Optional, Sequence, Union

import numpy as np

Key = Union[int, str]


@dataclass(frozen=True)
class Parameter:
    """Single named parameter with optional limits."""

    name: str
    value: float
    error: float
    lower: Optional[float] = None
    upper: Optional[float] = None
    fixed: bool = False

    def __post_init__(self) -> None:
        if not self.error > 0:
            raise ValueError(
                f"error of parameter {self.name!r} must be positive, got {self.error}"
            )
        if (
            self.lower is not None
            and self.upper is not None
            and not self.lower < self.upper
        ):
            raise ValueError(
                f"lower limit {self.lower} of parameter {self.name!r} must be "
                f"below upper limit {self.upper}"
            )

    @property
    def has_lower_limit(self) -> bool:
        return self.lower is not None

    @property
    def has_upper_limit(self) -> bool:
        return self.upper is not None

    @property
    def has_limits(self) -> bool:
        return self.has_lower_limit or self.has_upper_limit

    def within_limits(self, value: float) -> bool:
        """Return True if ``value`` lies inside (or on) the declared limits."""
        if self.lower is not None and value < self.lower:
            return False
        if self.upper is not None and value > self.upper:
            return False
        return True

    def clip(self, value: float) -> float:
        """Return ``value`` moved onto the nearest limit if it lies beyond one."""
        if self.lower is not None and value < self.lower:
            return float(self.lower)
        if self.upper is not None and value > self.upper:
            return float(self.upper)
        return float(value)


class ParameterState:
    """Ordered collection of parameters addressed by index or name."""

    def __init__(self, parameters: Sequence[Parameter] = ()) -> None:
        self._params: list[Parameter] = []
        for param in parameters:
            self._append(param)

    def _append(self, param: Parameter) -> None:
        if any(p.name == param.name for p in self._params):
            raise ValueError(f"Duplicate parameter name {param.name!r}")
        self._params.append(param)

    def add(
        self,
        name: str,
        value: float,
        error: float,
        lower: Optional[float] = None,
        upper: Optional[float] = None,
    ) -> int:
        """Append a free parameter and return its index."""
        self._append(
            Parameter(
                name=name,
                value=float(value),
                error=float(error),
                lower=None if lower is None else float(lower),
                upper=None if upper is None else float(upper),
            )
        )
        return len(self._params) - 1

    def index(self, key: Key) -> int:
        """Resolve a parameter name or index to an index."""
        if isinstance(key, str):
            for i, param in enumerate(self._params):
                if param.name == key:
                    return i
            raise ValueError(f"Unknown parameter {key!r}")
        i = int(key)
        if not 0 <= i < len(self._params):
            raise ValueError(
                f"Parameter index {i} out of range for {len(self._params)} parameters"
            )
        return i

    def __getitem__(self, key: Key) -> Parameter:
        return self._params[self.index(key)]

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._params)

    def __repr__(self) -> str:
        body = ", ".join(
            f"{p.name}={p.value:g}{' (fixed)' if p.fixed else ''}" for p in self._params
        )
        return f"ParameterState({body})"

    @property
    def names(self) -> list[str]:
        return [p.name for p in self._params]

    @property
    def values(self) -> np.ndarray:
        return np.array([p.value for p in self._params], dtype=float)

    @property
    def errors(self) -> np.ndarray:
        return np.array([p.error for p in self._params], dtype=float)

    @property
    def free_indices(self) -> list[int]:
        return [i for i, p in enumerate(self._params) if not p.fixed]

    @property
    def n_free(self) -> int:
        return len(self.free_indices)

    def _update(self, key: Key, **changes) -> None:
        i = self.index(key)
        self._params[i] = replace(self._params[i], **changes)

    def set_value(self, key: Key, value: float) -> None:
        self._update(key, value=float(value))

    def set_error(self, key: Key, error: float) -> None:
        self._update(key, error=float(error))

    def set_limits(
        self, key: Key, lower: Optional[float] = None, upper: Optional[float] = None
    ) -> None:
        self._update(
            key,
            lower=None if lower is None else float(lower),
            upper=None if upper is None else float(upper),
        )

    def fix(self, key: Key) -> None:
        self._update(key, fixed=True)

    def release(self, key: Key) -> None:
        self._update(key, fixed=False)

    def copy(self) -> "ParameterState":
        return ParameterState(self._params)

    def with_values(self, values: Sequence[float]) -> "ParameterState":
        """Return a copy whose parameter values are replaced by ``values``."""
        values = np.asarray(values, dtype=float).reshape(-1)
        if values.size != len(self._params):
            raise ValueError(
                f"Expected {len(self._params)} values, got {values.size}"
            )
        return ParameterState(
            [replace(p, value=float(v)) for p, v in zip(self._params, values)]
        )

    def with_fixed(
        self, indices: Sequence[Key], values: Sequence[float]
    ) -> "ParameterState":
        """Return a copy with the given parameters fixed at ``values``."""
        if len(indices) != len(values):
            raise ValueError("indices and values must have the same length")
        clone = self.copy()
        for key, value in zip(indices, values):
            clone._update(key, value=float(value), fixed=True)
        return clone


__all__ = ["Parameter", "ParameterState"]
