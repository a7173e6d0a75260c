"""Door controller — an implicit timeout on an open door.

The ``open`` node has a message branch ``{"after": "?hold"}``.  Entering
``open`` arms a timer; a ``close`` message that arrives first moves the
machine on and the timer is cancelled.  Otherwise the timer fires and the
machine receives ``{"after": ...}`` like any other message.

The "engine" here is a hand-written stand-in: it only produces the step
results (walks) a real machine engine would.
"""

import logging
from datetime import datetime, timedelta, timezone

from walktimers.config import TimerSettings
from walktimers.model.machine import Spec
from walktimers.model.walk import Walked
from walktimers.timers import ImplicitTimers, MemoryTimerStore

SPEC = Spec.model_validate({
    "name": "door",
    "nodes": {
        "closed": {
            "branching": {
                "type": "message",
                "branches": [{"pattern": {"open": "?hold"}, "target": "open"}],
            },
        },
        "open": {
            "branching": {
                "type": "message",
                "branches": [
                    {"pattern": {"close": True}, "target": "closed"},
                    {"pattern": {"after": "?hold"}, "target": "closed"},
                ],
            },
        },
    },
})


class Clock:
    def __init__(self):
        self.now = datetime(2030, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now


def step(src, dst, bs=None) -> Walked:
    return Walked.model_validate({
        "strides": [{"from": {"node": src}, "to": {"node": dst, "bs": bs or {}}}],
    })


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(name)s %(message)s")

    clock = Clock()
    store = MemoryTimerStore(clock=clock)
    timers = ImplicitTimers(store, settings=TimerSettings(implicit_timers=True), clock=clock)

    # Opened and explicitly closed before the timeout.
    timers.process("door-1", SPEC, step("closed", "open", {"?hold": "10s"}))
    clock.now += timedelta(seconds=4)
    timers.process("door-1", SPEC, step("open", "closed"))

    # Opened and left open.
    timers.process("door-2", SPEC, step("closed", "open", {"?hold": 5}))
    clock.now += timedelta(seconds=30)

    store.fire_due(lambda mid, msg: print(f"deliver to {mid}: {msg}"))
    print(f"pending: {sorted(store.pending)}")
