"""walktimers — implicit timers inferred from machine walks.

Entry point::

    from walktimers.timers import ImplicitTimers, MemoryTimerStore

    store = MemoryTimerStore()
    timers = ImplicitTimers(store)
    timers.process("machine-1", spec, walked)   # after every step
    store.fire_due(deliver)                     # whenever the host polls
"""

from __future__ import annotations

from ._errors import ImplicitTimerError, TimeExpressionError, TimerStoreError
from ._interpret import (
    CLOCK_TIME_FORMAT,
    interpret_time,
    parse_duration,
    parse_time_expression,
)
from ._processor import ImplicitTimers, after_value, is_variable
from ._store import (
    FiredTimer,
    MemoryTimerStore,
    PendingTimer,
    TimerStore,
    split_timer_key,
    timer_key,
)

__all__ = [
    "CLOCK_TIME_FORMAT",
    "FiredTimer",
    "ImplicitTimerError",
    "ImplicitTimers",
    "MemoryTimerStore",
    "PendingTimer",
    "TimeExpressionError",
    "TimerStore",
    "TimerStoreError",
    "after_value",
    "interpret_time",
    "is_variable",
    "parse_duration",
    "parse_time_expression",
    "split_timer_key",
    "timer_key",
]
