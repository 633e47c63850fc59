"""Logging utilities for profilecross.

Every algorithmic module asks for its logger with ``get_logger(__name__)``.
All loggers live under the ``profilecross`` namespace, write
``[LEVEL] name: message`` lines to stderr and do not propagate to the root
logger, so an application's own logging setup is left alone.

What gets logged:

- DEBUG: every trial of a crossing search and inner minimizer diagnostics,
- INFO: the outcome of each crossing search,
- WARNING: new minima, failed re-minimizations and abandoned searches.

The starting level is WARNING, or the value of the ``PROFILECROSS_LOG_LEVEL``
environment variable when set.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Optional

_ROOT = "profilecross"
_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
_LEVEL_ENV_VAR = "PROFILECROSS_LOG_LEVEL"

_loggers: dict[str, logging.Logger] = {}


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.strip().upper(), logging.WARNING)
    return int(level)


_level: int = _coerce_level(os.getenv(_LEVEL_ENV_VAR, "WARNING"))


def _qualified(name: Optional[str]) -> str:
    if not name or name == _ROOT:
        return _ROOT
    if name.startswith(_ROOT + "."):
        return name
    return f"{_ROOT}.{name}"


def _attach_handler(
    logger: logging.Logger, level: int, stream: Optional[IO[str]], fmt: str
) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the cached profilecross logger for ``name``.

    Names outside the package are placed under ``profilecross.``; ``None``
    gives the package logger itself.

    Example:
        >>> from profilecross.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("trial a=%.3f", 1.0)
    """
    qualified = _qualified(name)
    cached = _loggers.get(qualified)
    if cached is not None:
        return cached

    logger = logging.getLogger(qualified)
    if not logger.handlers:
        _attach_handler(logger, _level, None, _FORMAT)
        logger.propagate = False
    _loggers[qualified] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Change the level of every profilecross logger, existing and future.

    Args:
        level: A ``logging`` constant or its name, e.g. ``"DEBUG"``.
    """
    global _level
    _level = _coerce_level(level)
    for logger in _loggers.values():
        logger.setLevel(_level)
        for handler in logger.handlers:
            handler.setLevel(_level)


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Replace the handler of every profilecross logger created so far.

    Typically called once at application start-up, e.g. with
    ``configure_logging("INFO")`` to see the outcome of each crossing search.

    Args:
        level: Logging level (default: WARNING).
        format_string: Record format; defaults to ``[LEVEL] name: message``.
        stream: Output stream (default: sys.stderr).
    """
    global _level
    _level = _coerce_level(level)
    fmt = _FORMAT if format_string is None else format_string
    for logger in _loggers.values():
        _attach_handler(logger, _level, stream, fmt)


__all__ = ["get_logger", "set_log_level", "configure_logging"]
