"""Exceptions raised while inferring implicit timers.

None of these ever reach the host engine from ``ImplicitTimers.process``;
they are handed to the configured error sink instead.
"""

from __future__ import annotations


class ImplicitTimerError(Exception):
    """Base class for implicit-timer failures."""


class TimeExpressionError(ImplicitTimerError, ValueError):
    """An ``after`` value that cannot be turned into a fire time."""

    def __init__(self, message: str, value: object = None) -> None:
        super().__init__(message)
        self.value = value


class TimerStoreError(ImplicitTimerError):
    """A timer store ``add`` or ``remove`` call failed."""

    def __init__(self, operation: str, key: str, cause: BaseException) -> None:
        super().__init__(f"timer store {operation} {key!r} failed: {cause}")
        self.operation = operation
        self.key = key
        self.__cause__ = cause
