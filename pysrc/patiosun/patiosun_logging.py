"""
Logging for patiosun.

Every message lands in the standard ``logging`` tree under the module's
name. A host application may also attach a feedback sink that mirrors the
messages into its own UI:

- an object with ``pushInfo`` and optionally ``pushDebugInfo`` / ``reportError``
- any callable taking ``(level, message)``

Usage:
    from patiosun.patiosun_logging import get_logger

    logger = get_logger(__name__)
    logger.info(f"Building index published: {len(index)} buildings")
    logger.debug(f"Coalesced {n} clock updates into one frame")
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Subset of the stdlib levels used by patiosun."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


def _coerce_level(level: LogLevel | int) -> LogLevel:
    return level if isinstance(level, LogLevel) else LogLevel(level)


def _push_to_panel(panel: Any, level: LogLevel, message: str) -> None:
    # Panels without a dedicated error/debug channel fall back to pushInfo or drop debug
    if level >= LogLevel.ERROR and hasattr(panel, "reportError"):
        panel.reportError(message)
    elif level >= LogLevel.WARNING:
        panel.pushInfo(f"WARNING: {message}")
    elif level >= LogLevel.INFO:
        panel.pushInfo(message)
    elif hasattr(panel, "pushDebugInfo"):
        panel.pushDebugInfo(message)


class PatioSunLogger:
    """
    Level-filtered logger that mirrors messages to an optional feedback sink.

    Args:
        name: Name in the stdlib logging tree, normally ``__name__``.
        level: Messages below this level are dropped before reaching either
            destination.
    """

    def __init__(self, name: str, level: LogLevel | int = LogLevel.INFO):
        self.name = name
        self.level = _coerce_level(level)
        self._stdlib = logging.getLogger(name)
        self._feedback: Any = None

    def set_feedback(self, feedback: Any) -> None:
        """Attach a panel object or ``(level, message)`` callable; None detaches."""
        self._feedback = feedback

    def set_level(self, level: LogLevel | int) -> None:
        self.level = _coerce_level(level)

    def log(self, level: LogLevel | int, message: str) -> None:
        level = _coerce_level(level)
        if level < self.level:
            return
        self._stdlib.log(level, message)

        sink = self._feedback
        if sink is None:
            return
        if hasattr(sink, "pushInfo"):
            _push_to_panel(sink, level, message)
        elif callable(sink):
            sink(level, message)

    def debug(self, message: str) -> None:
        self.log(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        self.log(LogLevel.INFO, message)

    def warning(self, message: str) -> None:
        self.log(LogLevel.WARNING, message)

    def error(self, message: str) -> None:
        self.log(LogLevel.ERROR, message)


_registry: dict[str, PatioSunLogger] = {}


def get_logger(name: str, level: LogLevel | int = LogLevel.INFO) -> PatioSunLogger:
    """
    Return the shared logger for ``name``, creating it on first use.

    ``level`` only applies when the logger is created.
    """
    logger = _registry.get(name)
    if logger is None:
        logger = _registry[name] = PatioSunLogger(name, level)
    return logger


def set_global_level(level: LogLevel | int) -> None:
    """Apply ``level`` to every logger created so far."""
    for logger in _registry.values():
        logger.set_level(level)


def set_global_feedback(feedback: Any) -> None:
    """Attach ``feedback`` to every logger created so far (None detaches)."""
    for logger in _registry.values():
        logger.set_feedback(feedback)
