"""Walk event processing: arming and cancelling implicit timers.

If a message branch pattern has an ``after`` property, entering that
branch's node arms a timer and leaving the node cancels it (perhaps after
it already fired).  The timer's payload is ``{"after": <value>}``, so when
it fires it is delivered as an ordinary message that matches the branch.

Only one implicit timer per node is supported: the first branch whose
``after`` value reaches the store is armed, later ones are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable

from walktimers.config import TimerSettings
from walktimers.model.machine import Spec
from walktimers.model.walk import State, Walked

from ._errors import TimeExpressionError, TimerStoreError
from ._interpret import interpret_time
from ._store import TimerStore, timer_key

LOGGER = logging.getLogger(__name__)

AFTER = "after"

ErrorSink = Callable[[Exception], None]


def after_value(pattern: object) -> tuple[bool, Any]:
    """Return ``(True, value)`` if *pattern* is a mapping with an ``after`` field.

    Patterns of any other shape carry no timer and give ``(False, None)``.
    """
    if not isinstance(pattern, Mapping) or AFTER not in pattern:
        return False, None
    return True, pattern[AFTER]


def is_variable(value: object, prefix: str = "?") -> bool:
    """Whether *value* is a pattern-variable reference such as ``"?delay"``."""
    return isinstance(value, str) and value.startswith(prefix)


def _log_error(err: Exception) -> None:
    LOGGER.warning("Implicit timer error: %s", err)


class ImplicitTimers:
    """Creates and cancels timers from the strides of each machine step.

    Parameters
    ----------
    store
        The timer store receiving ``add``/``remove`` requests.
    settings
        Feature switch and variable convention; read from the environment
        when omitted.
    on_error
        Called with every failure.  Defaults to logging a warning.
    clock
        Returns the current aware UTC time; used both to interpret
        relative ``after`` values and to compute the delay passed to
        the store.
    """

    def __init__(
        self,
        store: TimerStore,
        settings: TimerSettings | None = None,
        on_error: ErrorSink | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.settings = settings if settings is not None else TimerSettings()
        self._on_error = on_error or _log_error
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def enabled(self) -> bool:
        return self.settings.implicit_timers

    def process(self, machine_id: str, spec: Spec, walked: Walked) -> None:
        """Cancel and arm timers for the strides of one completed step.

        Never raises: every failure is handed to the error sink and the
        remaining strides are still processed.
        """
        if not self.enabled:
            return

        for stride in walked.strides:
            # Cancel before arming; both may name the same node.
            if stride.from_ is not None and stride.to is not None:
                self._cancel(timer_key(machine_id, stride.from_.node_name))
            if stride.to is not None:
                self._arm(machine_id, spec, stride.to)

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------

    def _report(self, err: Exception) -> None:
        self._on_error(err)

    def _cancel(self, key: str) -> None:
        # Issued even when nothing was armed for this node.
        LOGGER.debug("Cancelling implicit timer %s", key)
        try:
            self.store.remove(key)
        except Exception as exc:
            self._report(TimerStoreError("remove", key, exc))

    def _arm(self, machine_id: str, spec: Spec, to: State) -> None:
        # Missing nodes and non-message branch sets are normal: most
        # nodes have no timer.
        node = spec.node(to.node_name)
        if node is None or node.branches is None or not node.branches.is_message:
            return

        for branch in node.branches.branches:
            found, x = after_value(branch.pattern)
            if not found:
                continue

            # An unbound variable is passed through as is; interpretation
            # will then reject it.
            if is_variable(x, self.settings.variable_prefix) and x in to.bs:
                x = to.bs[x]

            now = self._clock()
            try:
                fire_at = interpret_time(x, now)
            except TimeExpressionError as exc:
                self._report(exc)
                continue

            key = timer_key(machine_id, to.node_name)
            delay = fire_at - now
            LOGGER.debug("Arming implicit timer %s in %s", key, delay)
            try:
                self.store.add(key, {AFTER: x}, delay)
            except Exception as exc:
                self._report(TimerStoreError("add", key, exc))
            # One implicit timer per node.
            return
