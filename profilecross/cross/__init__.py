"""Function-crossing search for profile-cost confidence bounds."""

from .extrapolator import ParabolicExtrapolator
from .history import HISTORY_SIZE, TrialHistory, TrialPoint
from .result import CrossingRequest, CrossingResult, CrossStatus
from .solver import FunctionCrossSolver

__all__ = [
    "HISTORY_SIZE",
    "TrialPoint",
    "TrialHistory",
    "ParabolicExtrapolator",
    "CrossStatus",
    "CrossingRequest",
    "CrossingResult",
    "FunctionCrossSolver",
]
