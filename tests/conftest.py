"""Shared test helpers for the walktimers test suite."""

from datetime import datetime, timedelta, timezone

from walktimers.model.machine import Branch, Branches, Node, Spec
from walktimers.model.walk import State, Stride, Walked


NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def fixed_clock(now=NOW):
    """A clock that always reads *now*."""
    return lambda: now


class SteppingClock:
    """A clock the test advances by hand."""

    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds=0, ms=0):
        self.now += timedelta(seconds=seconds, milliseconds=ms)


class RecordingStore:
    """A TimerStore that records every call in order.

    ``fail_add`` / ``fail_remove`` make the matching call raise after
    recording it.
    """

    def __init__(self, fail_add=False, fail_remove=False):
        self.calls = []
        self.fail_add = fail_add
        self.fail_remove = fail_remove

    def add(self, key, payload, delay):
        self.calls.append(("add", key, payload, delay))
        if self.fail_add:
            raise RuntimeError("add refused")

    def remove(self, key):
        self.calls.append(("remove", key))
        if self.fail_remove:
            raise RuntimeError("remove refused")

    @property
    def adds(self):
        return [c for c in self.calls if c[0] == "add"]

    @property
    def removes(self):
        return [c for c in self.calls if c[0] == "remove"]


def message_node(*patterns):
    """Build a node whose message branches have the given patterns."""
    return Node(branches=Branches(
        type="message",
        branches=[Branch(pattern=p) for p in patterns],
    ))


def make_spec(**nodes):
    """Build a Spec; ``None`` values become nodes without branches."""
    return Spec(
        name="test",
        nodes={name: node if node is not None else Node() for name, node in nodes.items()},
    )


def stride(src=None, dst=None, bs=None):
    """Shorthand for a Stride from node *src* to node *dst*."""
    return Stride(
        from_=State(node_name=src) if src is not None else None,
        to=State(node_name=dst, bs=bs or {}) if dst is not None else None,
    )


def walked(*strides):
    return Walked(strides=list(strides))
