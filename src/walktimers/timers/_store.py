"""Timer store contract and an in-process reference store."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Protocol, runtime_checkable

from pydantic import BaseModel

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class TimerStore(Protocol):
    """The two primitives implicit timers need from a timer service.

    Both report failure by raising.  Removing a key with no pending timer
    is not a failure.
    """

    def add(self, key: str, payload: dict[str, Any], delay: timedelta) -> None: ...

    def remove(self, key: str) -> None: ...


class PendingTimer(BaseModel):
    key: str
    payload: dict[str, Any]
    fire_at: datetime


class FiredTimer(BaseModel):
    """A timer that came due, addressed back to its machine."""

    key: str
    machine_id: str
    node_name: str
    payload: dict[str, Any]
    fire_at: datetime


def timer_key(machine_id: str, node_name: str) -> str:
    """Key of the implicit timer owned by *node_name* in machine *machine_id*."""
    return f"{machine_id}/{node_name}"


def split_timer_key(key: str) -> tuple[str, str]:
    """Split ``"<machine_id>/<node_name>"`` into its two parts.

    Splits on the last ``/`` so machine ids may themselves contain ``/``.
    """
    machine_id, sep, node_name = key.rpartition("/")
    if not sep:
        raise ValueError(f"Malformed timer key: {key!r}")
    return machine_id, node_name


class MemoryTimerStore:
    """A ``TimerStore`` that keeps timers in a dict.

    Nothing fires on its own: the host calls ``pop_due()`` or
    ``fire_due()`` when it wants due timers delivered.  Adding a key that
    is already pending replaces the earlier timer.

    Parameters
    ----------
    clock
        Returns the current time as an aware UTC ``datetime``.  Defaults
        to the wall clock; tests pass a fixed or stepping clock.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._timers: dict[str, PendingTimer] = {}
        self._lock = threading.Lock()

    # -----------------------------------------------------------------------
    # TimerStore
    # -----------------------------------------------------------------------

    def add(self, key: str, payload: dict[str, Any], delay: timedelta) -> None:
        split_timer_key(key)
        timer = PendingTimer(
            key=key, payload=dict(payload), fire_at=self._clock() + delay,
        )
        with self._lock:
            self._timers[key] = timer
        LOGGER.debug("Timer %s set for %s", key, timer.fire_at.isoformat())

    def remove(self, key: str) -> None:
        with self._lock:
            removed = self._timers.pop(key, None)
        if removed is not None:
            LOGGER.debug("Timer %s removed", key)

    # -----------------------------------------------------------------------
    # Inspection / delivery
    # -----------------------------------------------------------------------

    @property
    def pending(self) -> dict[str, PendingTimer]:
        """Snapshot of pending timers by key."""
        with self._lock:
            return dict(self._timers)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._timers

    def __len__(self) -> int:
        with self._lock:
            return len(self._timers)

    def pop_due(self, now: datetime | None = None) -> list[FiredTimer]:
        """Remove and return every timer with ``fire_at <= now``.

        Results are ordered by fire time, then key.
        """
        if now is None:
            now = self._clock()
        with self._lock:
            due = [t for t in self._timers.values() if t.fire_at <= now]
            for t in due:
                del self._timers[t.key]

        fired = []
        for t in sorted(due, key=lambda t: (t.fire_at, t.key)):
            machine_id, node_name = split_timer_key(t.key)
            fired.append(FiredTimer(
                key=t.key,
                machine_id=machine_id,
                node_name=node_name,
                payload=t.payload,
                fire_at=t.fire_at,
            ))
        return fired

    def fire_due(
        self,
        deliver: Callable[[str, dict[str, Any]], None],
        now: datetime | None = None,
    ) -> int:
        """Deliver each due timer's payload to its machine.

        Returns the number of timers delivered.
        """
        fired = self.pop_due(now)
        for t in fired:
            LOGGER.debug("Timer %s fired", t.key)
            deliver(t.machine_id, t.payload)
        return len(fired)
