"""Precision and budget settings for crossing searches and re-minimizations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

_METHODS = ("bfgs", "lbfgs")


@dataclass(frozen=True)
class Strategy:
    """
    Configuration consulted (never mutated) by the crossing search.

    Args:
        level: Precision tier, 0 (fast), 1 (default) or 2 (careful).
        tolerance: A crossing is accepted when the profile cost lies within
            ``tolerance * target_delta`` of ``fmin + target_delta``.
        max_iterations: Maximum number of trial points per crossing.
        max_calls: Objective-call budget per crossing. ``None`` derives it
            from the number of free parameters, see :meth:`call_budget`.
        step_cap_factor: A proposed step may be at most this multiple of the
            previous step.
        max_failures: Number of failed inner re-minimizations tolerated
            before a crossing is abandoned.
        noise_tolerance: Relative tolerance separating a genuinely lower
            minimum from floating-point jitter.
        curvature_floor: Smallest rise above the minimum, as a fraction of
            the target delta, assumed when extrapolating from one trial.
        gradient_tolerance: Gradient-norm tolerance of inner minimizations.
        reminimize_maxiter: Iteration limit of inner minimizations.
        method: Inner minimizer, "bfgs" or "lbfgs".
    """

    level: int = 1
    tolerance: float = 0.01
    max_iterations: int = 15
    max_calls: Optional[int] = None
    step_cap_factor: float = 2.0
    max_failures: int = 2
    noise_tolerance: float = 1e-9
    curvature_floor: float = 0.1
    gradient_tolerance: float = 1e-6
    reminimize_maxiter: int = 500
    method: str = "bfgs"

    def __post_init__(self) -> None:
        if self.level not in (0, 1, 2):
            raise ValueError(f"level must be 0, 1 or 2, got {self.level}")
        if not self.tolerance > 0:
            raise ValueError(f"tolerance must be > 0, got {self.tolerance}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.max_calls is not None and self.max_calls < 1:
            raise ValueError(f"max_calls must be >= 1, got {self.max_calls}")
        if not self.step_cap_factor > 1.0:
            raise ValueError(
                f"step_cap_factor must be > 1, got {self.step_cap_factor}"
            )
        if self.max_failures < 0:
            raise ValueError(f"max_failures must be >= 0, got {self.max_failures}")
        if self.noise_tolerance < 0:
            raise ValueError(
                f"noise_tolerance must be >= 0, got {self.noise_tolerance}"
            )
        if not 0 < self.curvature_floor <= 1:
            raise ValueError(
                f"curvature_floor must lie in (0, 1], got {self.curvature_floor}"
            )
        if not self.gradient_tolerance > 0:
            raise ValueError(
                f"gradient_tolerance must be > 0, got {self.gradient_tolerance}"
            )
        if self.reminimize_maxiter < 1:
            raise ValueError(
                f"reminimize_maxiter must be >= 1, got {self.reminimize_maxiter}"
            )
        if self.method not in _METHODS:
            raise ValueError(
                f"Unsupported method {self.method!r}. Supported: {', '.join(_METHODS)}."
            )

    @classmethod
    def from_level(cls, level: int, **overrides) -> "Strategy":
        """Build the preset for ``level``; keyword overrides win."""
        presets = {
            0: dict(tolerance=0.05, max_iterations=10, gradient_tolerance=1e-4),
            1: dict(tolerance=0.01, max_iterations=15, gradient_tolerance=1e-6),
            2: dict(tolerance=0.005, max_iterations=25, gradient_tolerance=1e-8),
        }
        if level not in presets:
            raise ValueError(f"level must be 0, 1 or 2, got {level}")
        settings = {**presets[level], **overrides}
        return cls(level=level, **settings)

    def call_budget(self, n_free: int) -> int:
        """Objective-call budget for a problem with ``n_free`` free parameters."""
        if self.max_calls is not None:
            return self.max_calls
        n = max(int(n_free), 0)
        return 2 * (n + 1) * (200 + 100 * n + 5 * n * n)


__all__ = ["Strategy"]
