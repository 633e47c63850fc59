"""profilecross - profile-cost crossings and asymmetric (MINOS) errors."""

__version__ = "0.1.0"

# Crossing search
from .cross import (
    HISTORY_SIZE,
    CrossingRequest,
    CrossingResult,
    CrossStatus,
    FunctionCrossSolver,
    ParabolicExtrapolator,
    TrialHistory,
    TrialPoint,
)

# Diagnostics
from .diagnostics import (
    assert_good_standing,
    debug_context,
    in_good_standing,
    is_debug_enabled,
    set_debug_enabled,
)

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Minimization
from .minimize import QuasiNewtonReminimizer, Reminimization, Reminimizer

# MINOS errors
from .minos import Minos, MinosError, minos_errors
from .objective import FunctionObjective, Objective
from .parameters import Parameter, ParameterState
from .strategy import Strategy
from .transform import ParameterTransform

__all__ = [
    "__version__",
    # Parameters and configuration
    "Parameter",
    "ParameterState",
    "ParameterTransform",
    "Strategy",
    # Objectives
    "Objective",
    "FunctionObjective",
    # Minimization
    "Reminimizer",
    "Reminimization",
    "QuasiNewtonReminimizer",
    # Crossing search
    "HISTORY_SIZE",
    "TrialPoint",
    "TrialHistory",
    "ParabolicExtrapolator",
    "CrossStatus",
    "CrossingRequest",
    "CrossingResult",
    "FunctionCrossSolver",
    # MINOS
    "Minos",
    "MinosError",
    "minos_errors",
    # Diagnostics and logging
    "in_good_standing",
    "assert_good_standing",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    "get_logger",
    "set_log_level",
    "configure_logging",
]
