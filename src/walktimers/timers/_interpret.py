"""Interpretation of ``after`` values as absolute fire times.

Supported forms:

- a number (``int`` or ``float``) is seconds from now
- a string holding an integer is that many seconds from now
- a string in ``CLOCK_TIME_FORMAT`` is that UTC instant
- a string holding a unit-suffixed duration (``"1h30m"``, ``"250ms"``)
  is that duration from now

String forms are tried in exactly that order; the first that parses wins.

Precision is one microsecond throughout: fractional numeric seconds are
kept (``1.5`` is a second and a half, not truncated to ``1``), and
duration components finer than a microsecond are truncated toward zero.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from walktimers.model.time_expr import (
    AbsoluteInstant,
    RelativeDuration,
    RelativeSeconds,
    TimeExpression,
)

from ._errors import TimeExpressionError

CLOCK_TIME_FORMAT = "%Y-%m-%d %H:%M:%SZ"


# ---------------------------------------------------------------------------
# Lexical forms
# ---------------------------------------------------------------------------

_INTEGER_RE = re.compile(r"[+-]?\d+", re.ASCII)

# strptime alone accepts single-digit fields; require the exact layout first.
_CLOCK_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}Z", re.ASCII)

_DURATION_RE = re.compile(
    r"([+-])?"
    r"((?:(?:\d++(?:\.\d*+)?|\.\d++)(?:ns|us|µs|μs|ms|s|m|h))+)",
    re.ASCII,
)

_DURATION_PART_RE = re.compile(r"(\d++(?:\.\d*+)?|\.\d++)(ns|us|µs|μs|ms|s|m|h)")

_UNIT_NS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}


def parse_duration(text: str) -> timedelta:
    """Parse a signed, unit-suffixed duration such as ``"-1h2m3.5s"``.

    ``"0"`` (optionally signed) is accepted without a unit.  Resolution
    below one microsecond is truncated toward zero.
    """
    if text in ("0", "+0", "-0"):
        return timedelta(0)

    m = _DURATION_RE.fullmatch(text)
    if m is None:
        raise TimeExpressionError(f"invalid duration {text!r}", text)

    total_ns = 0
    for number, unit in _DURATION_PART_RE.findall(m.group(2)):
        total_ns += int(Decimal(number) * _UNIT_NS[unit])

    micros = total_ns // 1_000
    if m.group(1) == "-":
        micros = -micros
    try:
        return timedelta(microseconds=micros)
    except OverflowError as exc:
        raise TimeExpressionError(f"duration {text!r} out of range", text) from exc


def _parse_clock_time(text: str) -> datetime:
    if _CLOCK_RE.fullmatch(text) is None:
        raise TimeExpressionError(f"invalid clock time {text!r}", text)
    try:
        parsed = datetime.strptime(text, CLOCK_TIME_FORMAT)
    except ValueError as exc:
        raise TimeExpressionError(f"invalid clock time {text!r}", text) from exc
    return parsed.replace(tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def _unsupported(value: object) -> TimeExpressionError:
    return TimeExpressionError(
        f'unsupported "after" {value!r} ({type(value).__name__})', value,
    )


def parse_time_expression(value: object) -> TimeExpression:
    """Classify an ``after`` value into a timer expression variant.

    Raises ``TimeExpressionError`` when the value has an unsupported type
    or is a string that matches none of the supported forms.
    """
    # bool is an int subclass, but True is not "one second".
    if isinstance(value, bool):
        raise _unsupported(value)

    if isinstance(value, int):
        return RelativeSeconds(seconds=value)

    if isinstance(value, float):
        if not math.isfinite(value):
            raise _unsupported(value)
        return RelativeSeconds(seconds=value)

    if isinstance(value, str):
        if _INTEGER_RE.fullmatch(value):
            try:
                return RelativeSeconds(seconds=int(value))
            except ValueError:
                # Past the interpreter's int-conversion digit limit.
                pass
        try:
            return AbsoluteInstant(at=_parse_clock_time(value))
        except TimeExpressionError:
            pass
        try:
            return RelativeDuration(duration=parse_duration(value))
        except TimeExpressionError:
            pass

    raise _unsupported(value)


def interpret_time(value: object, now: datetime | None = None) -> datetime:
    """Return the absolute UTC time described by *value*.

    Relative forms are measured from *now*, which defaults to the current
    wall-clock time at the moment of the call.
    """
    expr = parse_time_expression(value)
    if now is None:
        now = datetime.now(timezone.utc)
    try:
        return expr.resolve(now)
    except OverflowError as exc:
        raise TimeExpressionError(
            f'"after" {value!r} is out of range', value,
        ) from exc
