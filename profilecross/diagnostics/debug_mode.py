"""Process-wide debug switch.

While debug mode is on, every crossing search records each trial point and
attaches the full trace to its result, as if ``trace=True`` had been passed.
The switch starts from the ``PROFILECROSS_DEBUG`` environment variable
("1", "true", "yes" or "on" enable it).
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

_DEBUG_ENV_VAR = "PROFILECROSS_DEBUG"
_TRUTHY = frozenset({"1", "true", "yes", "on"})

_debug_enabled: bool = os.getenv(_DEBUG_ENV_VAR, "0").strip().lower() in _TRUTHY


def is_debug_enabled() -> bool:
    """Return whether debug mode is currently on."""
    return _debug_enabled


def set_debug_enabled(enabled: bool) -> None:
    """Turn debug mode on or off for the whole process."""
    global _debug_enabled
    _debug_enabled = bool(enabled)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Set debug mode for the duration of a ``with`` block.

    The previous setting is restored on exit, also when the block raises.

    Example
    -------
    >>> with debug_context(True):
    ...     pass  # crossing results carry their trial trace here
    """
    global _debug_enabled
    previous = _debug_enabled
    _debug_enabled = bool(enabled)
    try:
        yield
    finally:
        _debug_enabled = previous


__all__ = ["is_debug_enabled", "set_debug_enabled", "debug_context"]
