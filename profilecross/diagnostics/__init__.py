"""Diagnostics and debugging utilities for profilecross."""

from .core import (
    assert_finite,
    assert_good_standing,
    in_good_standing,
    is_finite,
)
from .debug_mode import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

__all__ = [
    "is_finite",
    "assert_finite",
    "in_good_standing",
    "assert_good_standing",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
]
